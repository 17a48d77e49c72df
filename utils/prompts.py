from typing import Dict, Iterable
from langchain_core.prompts import PromptTemplate
from utils.schemas import ConversationTurn, Difficulty, Domain, InterviewType, InterviewSettings


def _template(text: str) -> PromptTemplate:
    return PromptTemplate.from_template(text)


# ==========================================
# 1. 공통 지시문
# ==========================================
def domain_instruction(domain: Domain) -> str:
    if domain == Domain.GENERAL:
        return "The scenario should be general and not specific to any industry."
    return (
        f"The scenario should be set in the {Domain(domain).value} industry. "
        "Make sure the context is relevant to that domain."
    )


def customization_instruction(company_name: str = "", job_description: str = "") -> str:
    if not (company_name or job_description):
        return ""
    return (
        f'Further customize this for a job interview at "{company_name or "an unspecified company"}". '
        f'The provided job description is: "{job_description or "not provided"}". '
        "The scenario should align with the potential challenges or projects this role might face."
    )


# Easy -> Medium -> Hard: 모호성/복잡도 증가
DEFAULT_DIFFICULTY_GUIDANCE: Dict[Difficulty, str] = {
    Difficulty.EASY: "Keep it well-defined, with a single clear goal and cooperative stakeholders.",
    Difficulty.MEDIUM: "Introduce some ambiguity or conflicting needs the candidate has to untangle.",
    Difficulty.HARD: "Make it complex and ill-defined, with competing constraints and incomplete information.",
}

SCENARIO_DIFFICULTY_GUIDANCE: Dict[InterviewType, Dict[Difficulty, str]] = {
    InterviewType.CASE_STUDY: {
        Difficulty.EASY: "Create a well-defined problem.",
        Difficulty.MEDIUM: "Introduce some ambiguity or conflicting needs.",
        Difficulty.HARD: "Present a complex, ill-defined business problem.",
    },
    InterviewType.SYSTEM_DESIGN: {
        Difficulty.EASY: "Describe a simple, well-known service (e.g., a pastebin service).",
        Difficulty.MEDIUM: "Introduce a requirement for scale or a specific feature (e.g., a real-time chat application).",
        Difficulty.HARD: (
            "Present a complex system with multiple components and high throughput requirements "
            "(e.g., a ride-sharing service or a video streaming platform)."
        ),
    },
    InterviewType.DSA: {
        Difficulty.EASY: "Choose a common problem involving arrays, strings, or hashmaps (e.g., Two Sum, Valid Parentheses).",
        Difficulty.MEDIUM: "Choose a problem involving trees, graphs, or dynamic programming (e.g., Level Order Traversal, Coin Change).",
        Difficulty.HARD: "Choose a complex problem involving advanced algorithms or data structures (e.g., Sliding Window Maximum).",
    },
    InterviewType.AGILE: {
        Difficulty.EASY: "Describe a straightforward process issue (e.g., daily stand-ups are running too long).",
        Difficulty.MEDIUM: "Describe a conflict or planning issue (e.g., the product owner frequently adds new work mid-sprint).",
        Difficulty.HARD: (
            "Describe a complex stakeholder or estimation problem (e.g., the team consistently overestimates "
            "its capacity, leading to missed deadlines and stakeholder frustration)."
        ),
    },
    InterviewType.BEHAVIORAL: {
        Difficulty.EASY: "Keep the tone relaxed and conversational.",
        Difficulty.MEDIUM: "Keep the tone professional and mention that you will ask for specific examples.",
        Difficulty.HARD: "Keep the tone formal and mention that you will probe each example in depth.",
    },
}


def difficulty_guidance(interview_type: InterviewType, difficulty: Difficulty) -> str:
    table = SCENARIO_DIFFICULTY_GUIDANCE.get(InterviewType(interview_type), DEFAULT_DIFFICULTY_GUIDANCE)
    return table[Difficulty(difficulty)]


# ==========================================
# 2. 시나리오 생성 프롬프트 (면접 유형별)
# ==========================================
_FOCUSED_SCENARIO = """
You are an expert interviewer for a Business Analyst position.
Generate a very brief (2-3 sentences) scenario to set the stage for an interview focused on **{interview_type}**.
The difficulty of the scenario should be: {difficulty}. {difficulty_guidance}
{domain_instruction}
{customization_instruction}
Provide ONLY the scenario description.
"""

SCENARIO_TEMPLATES: Dict[InterviewType, PromptTemplate] = {
    InterviewType.CASE_STUDY: _template("""
You are an expert interviewer for a Business Analyst position, and your methods are grounded in the BABOK (Business Analysis Body of Knowledge) Guide.
Generate a concise and engaging case study scenario for a job interview. The scenario should allow a candidate to demonstrate skills across multiple BABOK Knowledge Areas.

The difficulty of the scenario should be: {difficulty}. {difficulty_guidance}
{domain_instruction}
{customization_instruction}

Provide ONLY the scenario description, without any questions or introductions.
"""),
    InterviewType.PRODUCT_MANAGEMENT: _template(_FOCUSED_SCENARIO),
    InterviewType.REQUIREMENT_GATHERING: _template(_FOCUSED_SCENARIO),
    InterviewType.UAT: _template(_FOCUSED_SCENARIO),
    InterviewType.SYSTEM_DESIGN: _template("""
You are an expert interviewer for a senior software development or architect position.
Generate a concise, single-paragraph system design problem.
The difficulty of the problem should be: {difficulty}. {difficulty_guidance}
{domain_instruction}
{customization_instruction}
Example: "Design a URL shortening service like TinyURL that can handle millions of requests per day."
Provide ONLY the problem statement.
"""),
    InterviewType.DSA: _template("""
You are an expert technical interviewer.
Generate a single, clear Data Structures & Algorithms (DSA) problem statement suitable for a software engineering interview.
The difficulty of the problem should be: {difficulty}. {difficulty_guidance}
{domain_instruction}
{customization_instruction}
Example: "Given an array of integers nums and an integer target, return indices of the two numbers such that they add up to target."
Provide ONLY the problem statement.
"""),
    InterviewType.TECHNICAL: _template("""
You are an expert interviewer for a Business Analyst position.
Generate a very brief (2-3 sentences) technical context for an interview focused on **Technical Skills**.
The context should set up a scenario where a technical question (like SQL, API design, or data mapping) would be relevant.
The difficulty of the scenario should be: {difficulty}. {difficulty_guidance}
{domain_instruction}
{customization_instruction}
Example: "Our e-commerce platform needs to integrate with a new third-party shipping provider. We have their API documentation."
Provide ONLY the context.
"""),
    InterviewType.AGILE: _template("""
You are an expert Agile coach interviewing a Business Analyst or Scrum Master.
Generate a brief (2-3 sentences) scenario describing a common challenge faced in an Agile/Scrum team.
The difficulty of the scenario should be: {difficulty}. {difficulty_guidance}
{domain_instruction}
{customization_instruction}
Provide ONLY the scenario.
"""),
    InterviewType.BEHAVIORAL: _template("""
You are an expert interviewer for a Business Analyst position.
{customization_instruction}
You are about to start a behavioral interview at {difficulty} difficulty. {difficulty_guidance}
Provide a simple, welcoming opening statement to the candidate.
For example: "Thanks for coming in today. We're going to start with some questions about your past experiences."
Provide ONLY the opening statement.
"""),
    InterviewType.SITUATIONAL: _template("""
You are an expert interviewer for a Business Analyst position.
Generate a brief (2-3 sentences) but challenging workplace scenario for a **Situational Judgement Test**.
The scenario should present a dilemma involving conflicting priorities, difficult stakeholders, or ethical ambiguity that a Business Analyst might face.
The difficulty of the scenario should be: {difficulty}. {difficulty_guidance}
{domain_instruction}
{customization_instruction}
Provide ONLY the scenario.
"""),
}


def build_scenario_prompt(settings: InterviewSettings) -> str:
    template = SCENARIO_TEMPLATES[settings.interview_type]
    values = {
        "interview_type": settings.interview_type.value,
        "difficulty": settings.difficulty.value,
        "difficulty_guidance": difficulty_guidance(settings.interview_type, settings.difficulty),
        "domain_instruction": domain_instruction(settings.domain),
        "customization_instruction": customization_instruction(settings.company_name, settings.job_description),
    }
    return template.format(**{k: v for k, v in values.items() if k in template.input_variables})


# ==========================================
# 3. 첫 질문 프롬프트
# ==========================================
_FOCUSED_FIRST_QUESTION = """
You are an expert Business Analyst interviewer.
Based on the following short scenario, what is the best opening question to ask for an interview focused on **{interview_type}**?
The question should be open-ended and directly related to the core topic. If the question has multiple parts, use bullet points for clarity.
Scenario: "{scenario}"
Provide ONLY the question.
"""

FIRST_QUESTION_TEMPLATES: Dict[InterviewType, PromptTemplate] = {
    InterviewType.CASE_STUDY: _template("""
You are an expert Business Analyst interviewer grounded in the BABOK Guide.
Based on the following case study scenario, what is the best opening question to ask?
The question should prompt the candidate to begin with **Strategy Analysis**.
Scenario: "{scenario}"
Good examples: "How would you begin to approach this problem?", "What would be your first steps?"
**Format the question clearly. If it has multiple parts, use bullet points.**
Provide ONLY the question.
"""),
    InterviewType.PRODUCT_MANAGEMENT: _template(_FOCUSED_FIRST_QUESTION),
    InterviewType.REQUIREMENT_GATHERING: _template(_FOCUSED_FIRST_QUESTION),
    InterviewType.UAT: _template(_FOCUSED_FIRST_QUESTION),
    InterviewType.SYSTEM_DESIGN: _template("""
You are a system design interviewer.
The problem statement is: "{scenario}"
Ask a broad, open-ended opening question to kick off the design discussion.
The question should prompt the candidate to clarify requirements and scope. Use bullet points if the question has multiple parts.
Provide ONLY the question.
"""),
    InterviewType.DSA: _template("""
You are a DSA interviewer.
The problem is: "{scenario}"
Ask the candidate to explain their initial thoughts and approach.
The question should encourage them to think about data structures, algorithms, and complexity.
Provide ONLY the question.
"""),
    InterviewType.TECHNICAL: _template("""
You are an expert Technical Interviewer for a Business Analyst role.
Based on the following technical context, ask a relevant and specific technical question.
The question could be about SQL, API interaction, data modeling, or system design, depending on the context. If the question is complex, use bullet points.
Context: "{scenario}"
Provide ONLY the question.
"""),
    InterviewType.AGILE: _template("""
You are an Agile coach and interviewer.
The scenario is: "{scenario}"
Ask an open-ended question that prompts the candidate to analyze the situation and propose a course of action.
Provide ONLY the question.
"""),
    InterviewType.BEHAVIORAL: _template("""
You are an expert Business Analyst interviewer.
Your opening statement to the candidate was: "{scenario}"
Now, ask a common, open-ended behavioral question to start the interview.
Good examples: "Tell me about a time you faced a significant challenge on a project.", "Describe a situation where you had to influence stakeholders without direct authority."
Provide ONLY the question.
"""),
    InterviewType.SITUATIONAL: _template("""
You are an expert interviewer for a Business Analyst position.
Based on the following challenging scenario, ask a question that prompts the candidate to explain how they would handle the situation.
The question should be open-ended. If the question has multiple parts, use bullet points for clarity.
Scenario: "{scenario}"
Provide ONLY the question.
"""),
}


def build_first_question_prompt(scenario: str, interview_type: InterviewType) -> str:
    template = FIRST_QUESTION_TEMPLATES[InterviewType(interview_type)]
    values = {"scenario": scenario, "interview_type": InterviewType(interview_type).value}
    return template.format(**{k: v for k, v in values.items() if k in template.input_variables})


# ==========================================
# 4. 답변 평가 프롬프트
# ==========================================
EVALUATION_TEMPLATE = _template("""
You are an expert Business Analyst interviewer simulating an interview.
Your role is to evaluate the candidate's answer and ask a relevant follow-up question.

**Interview Details:**
- **Interview Type:** {interview_type}
- **Difficulty:** {difficulty}
- **Domain:** {domain}
- **Company:** {company_name}
- **Job Description:** {job_description}
- **Scenario/Context:** {scenario}
- **Current Turn:** {turn_number} of {max_turns}
- **Conversation History:**
{conversation_history}

**Candidate's Latest Answer to be Evaluated:**
"{answer}"

**Your Tasks:**
1. **Evaluate the answer:** Assess the candidate's response based on the principles of the **{interview_type}** interview type. If a company or job description was provided, factor that into your evaluation.
2. **Provide feedback:** Write brief (1-2 sentences), constructive feedback.
3. **Decide the next step:**
   - If the turn limit ({max_turns}) is reached, the interview MUST end. Set 'isGameOver' to true.
   - Otherwise, formulate a logical follow-up question that digs deeper or explores a new facet of the topic.
4. **Generate Final Feedback (if game is over):** If 'isGameOver' is true, provide a comprehensive final feedback summary (3-5 sentences) of the candidate's performance.
5. **Format your response:** You MUST respond with a single JSON object and nothing else.

{focus}

- 'nextQuestion' and 'nextQuestionCategory' MUST be empty strings if 'isGameOver' is true.
- 'finalFeedback' MUST be an empty string if 'isGameOver' is false.

JSON Output Format:
{{
  "feedback": "string",
  "nextQuestion": "string",
  "nextQuestionCategory": "string",
  "isGameOver": false,
  "finalFeedback": "string"
}}
""")

_FOCUSED_EVALUATION = """
**Evaluation Focus ({interview_type}):**
- Assess the answer for clarity, depth, and relevance to {interview_type}. Does it demonstrate practical knowledge?
- **Next Question:** Ask a follow-up question that challenges their assumption or asks for more detail on their proposed process. Use bullet points if the question is complex or has multiple parts.
- **Question Category:** The category should be a sub-topic within {interview_type} (e.g., 'Stakeholder Identification', 'Prioritization', 'Test Case Design').
"""

EVALUATION_FOCUS: Dict[InterviewType, str] = {
    InterviewType.CASE_STUDY: """
**Evaluation Focus (BABOK-based Case Study):**
- Evaluate the candidate's response based on BABOK principles relevant to the previous question's category.
- **BABOK Question Categories:**
  - Strategy Analysis
  - Business Analysis Planning and Monitoring
  - Elicitation and Collaboration
  - Requirements Analysis and Design Definition (RADD)
  - Solution Evaluation
- **Next Question:** Select a logical BABOK category that has not been heavily covered yet to ensure a well-rounded interview. Use bullet points if the question is complex or has multiple parts.
- **Question Category:** The category must be one of the BABOK categories listed above.
""",
    InterviewType.PRODUCT_MANAGEMENT: _FOCUSED_EVALUATION,
    InterviewType.REQUIREMENT_GATHERING: _FOCUSED_EVALUATION,
    InterviewType.UAT: _FOCUSED_EVALUATION,
    InterviewType.SYSTEM_DESIGN: """
**Evaluation Focus (System Design):**
- Did the candidate clarify requirements (functional/non-functional) before diving into design?
- Assess their high-level architecture. Did they consider scalability, availability, and fault tolerance?
- Evaluate their choice of components (database, cache, load balancer, message queues). Did they justify their trade-offs?
- **Next Question:** Dig deeper into a specific component of their design.
- **Question Category:** A system design concept (e.g., 'API Design', 'Database Schema', 'Caching Strategy', 'Scalability').
""",
    InterviewType.DSA: """
**Evaluation Focus (DSA):**
- Is the proposed solution correct? Does it handle edge cases?
- Evaluate the time and space complexity (Big O notation). Is the solution optimal?
- Did the candidate clearly explain their thought process?
- **Next Question:** Ask for an optimization of their current solution, or ask them to write pseudo-code or actual code for their algorithm.
- **Question Category:** A DSA concept (e.g., 'Time/Space Complexity', 'Optimization', 'Edge Cases', 'Algorithm Implementation').
""",
    InterviewType.TECHNICAL: """
**Evaluation Focus (Technical):**
- Assess the answer for technical accuracy and correctness. If they provided code (e.g., SQL), is it valid and efficient?
- Did they explain their reasoning clearly? Do they understand the underlying concepts?
- **Next Question:** Build on their answer or ask another technical question relevant to the context. Use bullet points for clarity.
- **Question Category:** The technical skill being tested (e.g., 'SQL Query', 'API Design', 'Data Mapping').
""",
    InterviewType.AGILE: """
**Evaluation Focus (Agile/Scrum):**
- Does the answer demonstrate a solid understanding of Agile principles and the Scrum framework (roles, events, artifacts)?
- Is the proposed solution practical and collaborative? Does it empower the team?
- **Next Question:** Challenge their proposed action or explore their knowledge of a specific Agile practice.
- **Question Category:** An Agile/Scrum topic (e.g., 'Sprint Planning', 'Stakeholder Management', 'Retrospectives', 'Backlog Refinement').
""",
    InterviewType.BEHAVIORAL: """
**Evaluation Focus (Behavioral):**
- Evaluate the answer based on the STAR method (Situation, Task, Action, Result). Did the candidate structure their response well?
- Was the example relevant? Was the outcome clear?
- **Next Question:** Ask another behavioral question that explores a different competency (e.g., teamwork, conflict resolution, problem-solving).
- **Question Category:** The competency you are targeting (e.g., 'Conflict Resolution').
""",
    InterviewType.SITUATIONAL: """
**Evaluation Focus (Situational Judgement):**
- Evaluate the candidate's judgement, professionalism, and problem-solving approach.
- Did they consider multiple perspectives (business needs, technical constraints, stakeholder impact)?
- **Next Question:** Explore the consequences of their proposed action or introduce a new complication to the scenario.
- **Question Category:** The core conflict (e.g., 'Stakeholder Management', 'Scope Creep', 'Conflict Resolution').
""",
}


def build_evaluation_prompt(
    settings: InterviewSettings,
    scenario: str,
    conversation_history: str,
    answer: str,
    turn_number: int,
    max_turns: int,
) -> str:
    focus = EVALUATION_FOCUS[settings.interview_type].replace("{interview_type}", settings.interview_type.value)
    return EVALUATION_TEMPLATE.format(
        interview_type=settings.interview_type.value,
        difficulty=settings.difficulty.value,
        domain=settings.domain.value,
        company_name=settings.company_name or "Not specified",
        job_description=settings.job_description or "Not provided",
        scenario=scenario,
        turn_number=turn_number,
        max_turns=max_turns,
        conversation_history=conversation_history,
        answer=answer,
        focus=focus,
    )


# ==========================================
# 5. 모범 답안 프롬프트
# ==========================================
SAMPLE_ANSWER_TEMPLATE = _template("""
You are an expert Business Analyst candidate in an interview.
Your task is to provide an ideal, well-structured sample answer to the interviewer's question.

**Interview Context:**
- **Type:** {interview_type}
- **Company:** {company_name}
- **Job Description Context:** {job_description}
- **Scenario:** {scenario}
- **Conversation History:**
{conversation_history}

**Current Question to Answer:**
"{question}"

**Instructions:**
1. Craft a high-quality answer from the perspective of a top-tier candidate.
2. {instruction}
3. The answer should demonstrate strong analytical and communication skills.
4. If a company or job description is provided, tailor the answer to reflect that context.
5. Provide ONLY the answer text, without any introductions like "Here is a sample answer:".
""")

DEFAULT_SAMPLE_ANSWER_INSTRUCTION = (
    "Provide a clear, concise, and professional answer that directly addresses all parts of the question."
)

SAMPLE_ANSWER_INSTRUCTIONS: Dict[InterviewType, str] = {
    InterviewType.BEHAVIORAL: "Structure the answer using the STAR (Situation, Task, Action, Result) method.",
    InterviewType.TECHNICAL: (
        "Provide a technically accurate and well-explained answer. "
        "If code is required, ensure it is correct and formatted properly."
    ),
    InterviewType.CASE_STUDY: (
        "Reference relevant business analysis frameworks or principles (like those in BABOK) where appropriate. "
        "The answer should be structured and logical."
    ),
}


def build_sample_answer_prompt(
    scenario: str,
    interview_type: InterviewType,
    conversation_history: str,
    question: str,
    company_name: str = "",
    job_description: str = "",
) -> str:
    interview_type = InterviewType(interview_type)
    return SAMPLE_ANSWER_TEMPLATE.format(
        interview_type=interview_type.value,
        company_name=company_name or "Not specified",
        job_description=job_description or "Not provided",
        scenario=scenario,
        conversation_history=conversation_history,
        question=question,
        instruction=SAMPLE_ANSWER_INSTRUCTIONS.get(interview_type, DEFAULT_SAMPLE_ANSWER_INSTRUCTION),
    )


def format_history(conversation: Iterable[ConversationTurn]) -> str:
    """Interviewer/Candidate transcript, turns separated by a blank line."""
    return "\n\n".join(
        f"Interviewer ({turn.category or 'General'}): {turn.question}\nCandidate: {turn.answer or ''}"
        for turn in conversation
    )

class InterviewError(Exception):
    """Base class for failures reported by the LLM gateway."""


class GenerationError(InterviewError):
    """Scenario or first-question generation failed."""


class EvaluationError(InterviewError):
    """Evaluation call failed or returned data that does not match EvaluationResult."""


class SampleAnswerError(InterviewError):
    """Sample answer generation failed. Only ever surfaces in the sample-answer side state."""

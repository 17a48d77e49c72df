import requests
import streamlit as st

from utils.config import AppConfig

# ==========================================
# 1. Config & API client
# ==========================================
config = AppConfig.from_env()
API_URL = config.api_url.rstrip("/")
TIMEOUT = 120


def api(method: str, path: str, payload: dict = None) -> dict:
    resp = requests.request(method, f"{API_URL}{path}", json=payload, timeout=TIMEOUT)
    resp.raise_for_status()
    return resp.json() if resp.content else {}


def session_path(suffix: str = "") -> str:
    return f"/api/sessions/{st.session_state.session_id}{suffix}"


def forget_session():
    # 서버가 세션을 모름 (API 재시작 또는 삭제): 다음 실행에서 새 세션 생성
    st.session_state.pop("session_id", None)
    st.session_state.pop("snapshot", None)


def dispatch(method: str, suffix: str, payload: dict = None):
    """Send one intent and keep the returned snapshot."""
    try:
        st.session_state.snapshot = api(method, session_path(suffix), payload)
    except requests.HTTPError as e:
        if e.response is not None and e.response.status_code == 404:
            forget_session()
            st.session_state.transport_error = "Your session has expired. A new session was started."
            st.rerun()
        else:
            st.session_state.transport_error = str(e)
    except requests.RequestException as e:
        st.session_state.transport_error = str(e)


# ==========================================
# 2. Session bootstrap
# ==========================================
st.set_page_config(page_title="AI Interview Simulator", layout="wide")

if "options" not in st.session_state:
    try:
        st.session_state.options = api("GET", "/api/options")
    except requests.RequestException as e:
        st.error(f"Interview API is not reachable at {API_URL}: {e}")
        st.stop()

if "session_id" not in st.session_state:
    try:
        snapshot = api("POST", "/api/sessions")
    except requests.RequestException as e:
        st.error(f"Could not create an interview session at {API_URL}: {e}")
        st.stop()
    st.session_state.session_id = snapshot["session"]["session_id"]
    st.session_state.snapshot = snapshot

st.session_state.setdefault("transport_error", None)

options = st.session_state.options
snapshot = st.session_state.snapshot
session = snapshot["session"]
status = session["status"]

st.title("AI Interview Simulator")

with st.sidebar:
    st.caption(f"Session: `{st.session_state.session_id}`")
    if st.button("Start over"):
        dispatch("POST", "/restart")
        st.rerun()

if st.session_state.transport_error:
    st.warning(f"Request failed: {st.session_state.transport_error}")
    st.session_state.transport_error = None


# ==========================================
# 3. Screens
# ==========================================
def welcome_screen():
    st.subheader("Set up your interview")
    difficulty = st.radio(
        "Difficulty",
        options["difficulties"],
        index=options["difficulties"].index("Medium"),
        horizontal=True,
        format_func=lambda d: f"{d} ({options['max_turns'][d]} questions)",
    )
    domain = st.selectbox("Domain", options["domains"])
    interview_type = st.selectbox("Interview type", options["interview_types"])
    company_name = st.text_input("Company (optional)")
    job_description = st.text_area("Job description (optional)")
    if st.button("Start interview", type="primary"):
        with st.spinner("Generating your interview scenario..."):
            dispatch("POST", "/start", {
                "difficulty": difficulty,
                "domain": domain,
                "interview_type": interview_type,
                "company_name": company_name,
                "job_description": job_description,
            })
        st.rerun()


def sample_answer_panel():
    sample = snapshot["sample_answer"]
    if sample["status"] == "IDLE":
        return
    with st.expander("Sample answer", expanded=True):
        if sample["status"] == "READY":
            st.markdown(sample["text"])
        elif sample["status"] == "ERROR":
            st.error(sample["error"])
        if st.button("Close sample answer"):
            dispatch("DELETE", "/sample-answer")
            st.rerun()


def game_screen():
    settings = session["settings"]
    conversation = session["conversation"]
    st.caption(
        f"{settings['interview_type']} · {settings['domain']} · {settings['difficulty']} · "
        f"question {len(conversation)} of {options['max_turns'][settings['difficulty']]}"
    )
    st.info(session["scenario"])

    for i, turn in enumerate(conversation, start=1):
        st.markdown(f"**Q{i} ({turn['category'] or 'General'})**")
        st.markdown(turn["question"])
        if turn["answer"]:
            st.markdown(f"> {turn['answer']}")
        if turn["feedback"]:
            st.success(turn["feedback"])
        st.markdown("---")

    evaluating = status == "EVALUATING"
    with st.form("answer_form", clear_on_submit=True):
        answer = st.text_area("Your answer", disabled=evaluating)
        submitted = st.form_submit_button("Submit answer", disabled=evaluating)
    if submitted and answer.strip():
        with st.spinner("Evaluating your answer..."):
            dispatch("POST", "/answer", {"answer": answer})
        st.rerun()

    if st.button("Show sample answer"):
        with st.spinner("Writing a sample answer..."):
            dispatch("POST", "/sample-answer")
        st.rerun()
    sample_answer_panel()


def feedback_screen():
    st.subheader("Interview complete")
    st.markdown(session["final_feedback"])
    with st.expander("Review the conversation"):
        for turn in session["conversation"]:
            st.markdown(f"**{turn['question']}**")
            st.markdown(f"> {turn['answer']}")
            st.caption(turn["feedback"])
    if st.button("Start a new interview", type="primary"):
        dispatch("POST", "/restart")
        st.rerun()


def error_screen():
    st.error(session["last_error"] or "An error occurred.")
    col1, col2 = st.columns(2)
    if col1.button("Try again", type="primary"):
        with st.spinner("Retrying..."):
            dispatch("POST", "/retry")
        st.rerun()
    if col2.button("Start Over"):
        dispatch("POST", "/restart")
        st.rerun()


SCREENS = {
    "WELCOME": welcome_screen,
    "GENERATING": lambda: st.info("Generating your interview scenario..."),
    "PLAYING": game_screen,
    "EVALUATING": game_screen,
    "FINISHED": feedback_screen,
    "ERROR": error_screen,
}

SCREENS[status]()

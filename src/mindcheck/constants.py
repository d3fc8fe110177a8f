"""Wellness-check constants shared across the SDK.

These values are referenced by the questionnaire controller, the wizard and
the analysis client.  They mirror conventions encoded in the question catalog
under ``mindcheck/data/``.

Several constants can be overridden via environment variables so that
deployments can adjust the escalation threshold or the model without code
changes.
"""

import os

# Sentinel stored for every question that has not been answered yet.
UNSET_ANSWER = -1

# Question whose score can trigger the high-risk follow-up block.
SELF_HARM_QID = "self_harm"

# A self-harm score at or above this value appends the high-risk block.
# Overridable via MINDCHECK_ESCALATION_THRESHOLD env var.
ESCALATION_THRESHOLD = int(os.getenv("MINDCHECK_ESCALATION_THRESHOLD", "2"))

# Classifier output values that route a session to crisis intervention.
# Either one is sufficient.
HIGH_RISK_ALERT = "Immediate Support Suggested"
HIGH_RISK_PREDICTION = "Suicidal"

# Gemini model used by the analysis client.
# Overridable via MINDCHECK_MODEL env var.
DEFAULT_MODEL = os.getenv("MINDCHECK_MODEL", "gemini-2.5-flash")

# Env vars checked (in order) for the classifier credential.
API_KEY_ENV_VARS: tuple[str, ...] = ("API_KEY", "GEMINI_API_KEY")

# Messages surfaced to the user.
REGISTRATION_REQUIRED_MESSAGE = (
    "Please provide your details so we can assist you better."
)
ANALYSIS_FAILED_MESSAGE = "Failed to analyze assessment data. Please try again."

# Human-readable stage names for API responses and logging.
STAGE_NAMES: dict[int, str] = {
    0: "Consent",
    1: "Register",
    2: "Home",
    3: "Assessment",
    4: "Description",
    5: "Loading",
    6: "Results",
    7: "Crisis Intervention",
}

"""Public model re-exports for mindcheck.

Consumers should import from ``mindcheck.models`` rather than reaching into
sub-modules directly.
"""

# --- Questions ---
from mindcheck.models.question import AnswerValue, Option, QuestionDefinition

# --- Results ---
from mindcheck.models.result import (
    AnalysisResult,
    NLPInsights,
    NotificationResult,
)

# --- Session / step ---
from mindcheck.models.session import (
    AnswerOutcome,
    SessionContext,
    SessionInfo,
    UserProfile,
    WizardStage,
    WizardStep,
)

__all__ = [
    # Questions
    "AnswerValue",
    "Option",
    "QuestionDefinition",
    # Results
    "AnalysisResult",
    "NLPInsights",
    "NotificationResult",
    # Session
    "AnswerOutcome",
    "SessionContext",
    "SessionInfo",
    "UserProfile",
    "WizardStage",
    "WizardStep",
]

"""mindcheck — guided mental-wellness self-assessment SDK.

Public API:
    WellnessWizard         — stage machine from consent to results or crisis
    AdaptiveQuestionnaire  — question position and one-time escalation
    QuestionCatalog        — loads the base and high-risk question blocks
    SessionStore           — in-memory map of session contexts
    PromptManager          — renders classifier prompts

External collaborators:
    Classifier             — ABC for the remote risk classifier
    GeminiClassifier       — Google Gemini implementation
    GuardianNotifier       — ABC for guardian alerts
    WebhookGuardianNotifier / LoggingGuardianNotifier

Errors:
    ValidationError, AnalysisError, ConfigurationError, ServiceError
"""

from mindcheck.analysis import GeminiClassifier
from mindcheck.catalog import QuestionCatalog
from mindcheck.errors import (
    AnalysisError,
    ConfigurationError,
    MindcheckError,
    ServiceError,
    ValidationError,
)
from mindcheck.interfaces import Classifier, GuardianNotifier
from mindcheck.models import (
    AnalysisResult,
    AnswerOutcome,
    NotificationResult,
    QuestionDefinition,
    SessionContext,
    SessionInfo,
    UserProfile,
    WizardStage,
    WizardStep,
)
from mindcheck.notifier import LoggingGuardianNotifier, WebhookGuardianNotifier
from mindcheck.prompt import PromptManager
from mindcheck.questionnaire import AdaptiveQuestionnaire
from mindcheck.store import SessionStore
from mindcheck.wizard import WellnessWizard, progress_percent

__all__ = [
    # Core
    "WellnessWizard",
    "AdaptiveQuestionnaire",
    "QuestionCatalog",
    "SessionStore",
    "PromptManager",
    "progress_percent",
    # Collaborators
    "Classifier",
    "GeminiClassifier",
    "GuardianNotifier",
    "LoggingGuardianNotifier",
    "WebhookGuardianNotifier",
    # Models
    "AnalysisResult",
    "AnswerOutcome",
    "NotificationResult",
    "QuestionDefinition",
    "SessionContext",
    "SessionInfo",
    "UserProfile",
    "WizardStage",
    "WizardStep",
    # Errors
    "MindcheckError",
    "ValidationError",
    "AnalysisError",
    "ConfigurationError",
    "ServiceError",
]

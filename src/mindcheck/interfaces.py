"""Abstract interfaces for the external collaborators of the wizard.

These ABCs define the contract that concrete implementations must fulfil.
The SDK ships a Gemini-backed classifier and two notifiers; tests substitute
in-memory doubles returning canned results.

Typical integration flow::

    wizard = WellnessWizard(
        questionnaire,
        classifier=GeminiClassifier(),
        notifier=WebhookGuardianNotifier(url),
    )
    ctx = wizard.new_session(user_id="u1", session_id="s1")
    # ... consent, register, answer questions ...
    await wizard.submit_description(ctx, "I have not been sleeping")
    # ctx.stage is RESULTS or CRISIS_INTERVENTION (or DESCRIPTION on failure)
"""

from abc import ABC, abstractmethod
from typing import Mapping

from mindcheck.models.question import AnswerValue
from mindcheck.models.result import AnalysisResult, NotificationResult
from mindcheck.models.session import UserProfile


class Classifier(ABC):
    """Interface for the remote mental-wellness risk classifier.

    The SDK performs no risk modelling of its own; classification is
    delegated entirely to the implementation.
    """

    @abstractmethod
    async def classify(
        self, answers: Mapping[str, AnswerValue], free_text: str
    ) -> AnalysisResult:
        """Classify a completed assessment.

        Parameters
        ----------
        answers:
            Mapping of question id to answer.  Contains every base question
            id; unanswered entries hold the unset sentinel.  High-risk ids
            are present only when the session escalated.
        free_text:
            The user's own description.  May be empty.

        Returns
        -------
        AnalysisResult

        Raises
        ------
        AnalysisError
            Any failure.  Callers do not distinguish subtypes.
        """
        ...


class GuardianNotifier(ABC):
    """Interface for alerting a registered guardian about a high-risk result."""

    @abstractmethod
    async def notify(
        self, profile: UserProfile, result: AnalysisResult
    ) -> NotificationResult:
        """Dispatch an alert to ``profile.guardian_phone``.

        Implementations report delivery failure through the returned
        ``NotificationResult`` instead of raising.
        """
        ...

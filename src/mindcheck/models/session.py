"""Session and step models — the contract between the wizard and API callers.

``SessionContext`` is the whole state of one user's run through the wizard.
It is passed into every transition function and returned from it; nothing
about a session lives anywhere else.

``WizardStep`` is the read-only view handed to the presentation layer for
the current stage.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Dict, Optional

from pydantic import BaseModel, Field

from mindcheck.constants import STAGE_NAMES
from mindcheck.models.question import AnswerValue, QuestionDefinition
from mindcheck.models.result import AnalysisResult, NotificationResult


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WizardStage(enum.IntEnum):
    """Stages of the wizard, in flow order.

    Transitions:
        consent -> register -> home -> assessment -> description -> loading
        loading -> results | crisis_intervention
        loading -> description              (analysis failed)
        results | crisis_intervention -> home   (restart)

    Ordinals drive the progress bar, so later stages must keep strictly
    greater values.  Loading, Results and CrisisIntervention are branches
    after Description.
    """

    CONSENT = 0
    REGISTER = 1
    HOME = 2
    ASSESSMENT = 3
    DESCRIPTION = 4
    LOADING = 5
    RESULTS = 6
    CRISIS_INTERVENTION = 7

    @property
    def label(self) -> str:
        return STAGE_NAMES[self.value]


class UserProfile(BaseModel):
    """Registration details.  ``guardian_phone`` is optional."""

    name: str = ""
    phone: str = ""
    guardian_phone: str = ""


class SessionContext(BaseModel):
    """Complete mutable state of one wizard session."""

    user_id: str
    session_id: str
    stage: WizardStage = WizardStage.CONSENT
    user: UserProfile = Field(default_factory=UserProfile)

    # Questionnaire state; the active sequence is derived from ``escalated``
    answers: Dict[str, AnswerValue] = Field(default_factory=dict)
    question_index: int = 0
    escalated: bool = False

    description: str = ""
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None

    guardian_notified: bool = False
    notification: Optional[NotificationResult] = None

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    def touch(self) -> None:
        """Bump ``updated_at`` after a mutation."""
        self.updated_at = _utcnow()


class AnswerOutcome(BaseModel):
    """Result of submitting one questionnaire answer.

    Exactly one of ``complete`` / ``next_question`` is set.
    """

    complete: bool
    next_question: Optional[QuestionDefinition] = None
    # True only on the submission that triggered the escalation
    escalated: bool = False


class WizardStep(BaseModel):
    """Read-only view of the current stage for the presentation layer."""

    stage: WizardStage
    stage_name: str
    # None while on Home, where no progress bar is shown
    progress: Optional[float] = None

    # Assessment stage only
    question: Optional[QuestionDefinition] = None
    question_number: Optional[int] = None
    total_questions: Optional[int] = None

    description: str = ""
    error: Optional[str] = None
    result: Optional[AnalysisResult] = None

    # Crisis intervention only
    guardian_contact_on_file: bool = False
    guardian_notified: bool = False
    notification: Optional[NotificationResult] = None


class SessionInfo(BaseModel):
    """Public view of session metadata for API consumers."""

    user_id: str
    session_id: str
    stage: WizardStage
    stage_name: str
    created_at: datetime
    updated_at: datetime

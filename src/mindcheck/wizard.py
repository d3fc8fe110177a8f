"""WellnessWizard — the stage machine from consent through results or crisis.

Stateless wizard pattern: every operation takes the session's
:class:`SessionContext`, checks that the session is in the right stage,
mutates the context, and returns it.  The caller (typically a FastAPI
endpoint) owns loading and storing contexts.

Stage overview:
    0  Consent             — user confirms the disclaimer
    1  Register            — name and phone required, guardian optional
    2  Home                — landing page; start an assessment
    3  Assessment          — adaptive questionnaire, one question at a time
    4  Description         — free-text notes
    5  Loading             — classifier call in flight
    6  Results             — supportive report
    7  Crisis Intervention — high-risk view, guardian alerted if on file

A failed analysis returns the session to Description with an error message;
answers and notes are kept so the user can resubmit without retyping.
"""

from __future__ import annotations

import logging

from mindcheck.constants import (
    ANALYSIS_FAILED_MESSAGE,
    REGISTRATION_REQUIRED_MESSAGE,
    STAGE_NAMES,
)
from mindcheck.errors import AnalysisError, ValidationError
from mindcheck.interfaces import Classifier, GuardianNotifier
from mindcheck.models.question import AnswerValue
from mindcheck.models.result import NotificationResult
from mindcheck.models.session import (
    AnswerOutcome,
    SessionContext,
    SessionInfo,
    UserProfile,
    WizardStage,
    WizardStep,
)
from mindcheck.notifier import LoggingGuardianNotifier
from mindcheck.questionnaire import AdaptiveQuestionnaire

logger = logging.getLogger(__name__)


def progress_percent(stage: WizardStage) -> float | None:
    """Progress-bar fill for *stage*, or ``None`` on Home (bar hidden).

    Home starts the active flow; each later stage adds a third, capped at
    100.
    """
    if stage == WizardStage.HOME:
        return None
    return min(100.0, max(0.0, (stage - 1) / 3 * 100))


class WellnessWizard:
    """Orchestrates a session across the wizard stages.

    Args:
        questionnaire: the :class:`AdaptiveQuestionnaire` for the assessment
        classifier: remote risk classifier
        notifier: guardian alert channel; defaults to
            :class:`LoggingGuardianNotifier`
    """

    def __init__(
        self,
        questionnaire: AdaptiveQuestionnaire,
        classifier: Classifier,
        notifier: GuardianNotifier | None = None,
    ) -> None:
        self._questionnaire = questionnaire
        self._classifier = classifier
        self._notifier = notifier or LoggingGuardianNotifier()

    @property
    def questionnaire(self) -> AdaptiveQuestionnaire:
        return self._questionnaire

    # ==================================================================
    # Session lifecycle
    # ==================================================================

    def new_session(self, *, user_id: str, session_id: str) -> SessionContext:
        """Build a fresh context at the Consent stage with unset answers."""
        ctx = SessionContext(user_id=user_id, session_id=session_id)
        self._questionnaire.reset(ctx)
        return ctx

    @staticmethod
    def session_info(ctx: SessionContext) -> SessionInfo:
        return SessionInfo(
            user_id=ctx.user_id,
            session_id=ctx.session_id,
            stage=ctx.stage,
            stage_name=STAGE_NAMES[ctx.stage],
            created_at=ctx.created_at,
            updated_at=ctx.updated_at,
        )

    # ==================================================================
    # Transitions
    # ==================================================================

    def confirm_consent(self, ctx: SessionContext) -> SessionContext:
        """Consent -> Register."""
        self._require_stage(ctx, WizardStage.CONSENT, "confirm_consent")
        self._move(ctx, WizardStage.REGISTER)
        return ctx

    def register(
        self,
        ctx: SessionContext,
        *,
        name: str,
        phone: str,
        guardian_phone: str = "",
    ) -> SessionContext:
        """Register -> Home once name and phone are both given.

        Raises:
            ValidationError: if name or phone is empty; the session stays
                in Register
        """
        self._require_stage(ctx, WizardStage.REGISTER, "register")
        name, phone = name.strip(), phone.strip()
        if not name or not phone:
            raise ValidationError(REGISTRATION_REQUIRED_MESSAGE)

        ctx.user = UserProfile(
            name=name, phone=phone, guardian_phone=guardian_phone.strip(),
        )
        self._move(ctx, WizardStage.HOME)
        return ctx

    def start_assessment(self, ctx: SessionContext) -> SessionContext:
        """Home -> Assessment."""
        self._require_stage(ctx, WizardStage.HOME, "start_assessment")
        self._move(ctx, WizardStage.ASSESSMENT)
        return ctx

    def submit_answer(
        self, ctx: SessionContext, *, qid: str, value: AnswerValue
    ) -> AnswerOutcome:
        """Answer the current question; Assessment -> Description when done."""
        self._require_stage(ctx, WizardStage.ASSESSMENT, "submit_answer")
        outcome = self._questionnaire.submit_answer(ctx, qid, value)
        if outcome.complete:
            self._move(ctx, WizardStage.DESCRIPTION)
        return outcome

    async def submit_description(
        self, ctx: SessionContext, text: str
    ) -> SessionContext:
        """Description -> Loading -> Results | CrisisIntervention.

        On any :class:`AnalysisError` the session goes back to Description
        with ``ctx.error`` set and the entered text preserved.
        """
        self._require_stage(ctx, WizardStage.DESCRIPTION, "submit_description")
        ctx.description = text
        ctx.error = None
        self._move(ctx, WizardStage.LOADING)

        try:
            result = await self._classifier.classify(dict(ctx.answers), text)
        except AnalysisError as exc:
            logger.error("Analysis failed for session %s: %s", ctx.session_id, exc)
            ctx.error = ANALYSIS_FAILED_MESSAGE
            self._move(ctx, WizardStage.DESCRIPTION)
            return ctx
        except Exception:
            # Unexpected failures propagate, but the session must not stay in Loading
            self._move(ctx, WizardStage.DESCRIPTION)
            raise

        ctx.result = result
        if not result.is_high_risk:
            self._move(ctx, WizardStage.RESULTS)
            return ctx

        self._move(ctx, WizardStage.CRISIS_INTERVENTION)
        if ctx.user.guardian_phone:
            await self._dispatch_guardian_alert(ctx)
        return ctx

    def restart(self, ctx: SessionContext) -> SessionContext:
        """Results | CrisisIntervention -> Home, clearing all assessment data.

        The registration profile is kept.
        """
        if ctx.stage not in (WizardStage.RESULTS, WizardStage.CRISIS_INTERVENTION):
            raise ValueError(
                f"restart is only valid during Results or Crisis Intervention, "
                f"but session is in '{STAGE_NAMES[ctx.stage]}'"
            )
        self._questionnaire.reset(ctx)
        ctx.description = ""
        ctx.result = None
        ctx.error = None
        ctx.guardian_notified = False
        ctx.notification = None
        self._move(ctx, WizardStage.HOME)
        return ctx

    def acknowledge_notification(self, ctx: SessionContext) -> SessionContext:
        """Record out-of-band confirmation that the guardian was reached."""
        self._require_stage(
            ctx, WizardStage.CRISIS_INTERVENTION, "acknowledge_notification",
        )
        if not ctx.user.guardian_phone:
            raise ValueError(
                "acknowledge_notification is only valid during a crisis with "
                "a guardian contact on file"
            )
        ctx.guardian_notified = True
        ctx.touch()
        return ctx

    # ==================================================================
    # Read-only view
    # ==================================================================

    def current_step(self, ctx: SessionContext) -> WizardStep:
        """Build the presentation view for the current stage."""
        step = WizardStep(
            stage=ctx.stage,
            stage_name=STAGE_NAMES[ctx.stage],
            progress=progress_percent(ctx.stage),
            description=ctx.description,
            error=ctx.error,
            result=ctx.result,
        )

        if ctx.stage == WizardStage.ASSESSMENT:
            seq = self._questionnaire.sequence(ctx)
            step.question = self._questionnaire.current_question(ctx)
            step.question_number = ctx.question_index + 1
            step.total_questions = len(seq)
        elif ctx.stage == WizardStage.CRISIS_INTERVENTION:
            step.guardian_contact_on_file = bool(ctx.user.guardian_phone)
            step.guardian_notified = ctx.guardian_notified
            step.notification = ctx.notification

        return step

    # ==================================================================
    # Internal helpers
    # ==================================================================

    async def _dispatch_guardian_alert(self, ctx: SessionContext) -> None:
        """Send the guardian alert; failures are recorded, never raised."""
        try:
            outcome = await self._notifier.notify(ctx.user, ctx.result)
        except Exception as exc:
            logger.exception("Guardian notifier raised for session %s", ctx.session_id)
            outcome = NotificationResult(
                delivered=False,
                channel=type(self._notifier).__name__,
                detail=str(exc) or type(exc).__name__,
            )
        ctx.notification = outcome
        ctx.guardian_notified = outcome.delivered
        ctx.touch()

    @staticmethod
    def _require_stage(
        ctx: SessionContext, expected: WizardStage, operation: str
    ) -> None:
        if ctx.stage != expected:
            raise ValueError(
                f"{operation} is only valid during '{STAGE_NAMES[expected]}', "
                f"but session is in '{STAGE_NAMES[ctx.stage]}'"
            )

    @staticmethod
    def _move(ctx: SessionContext, stage: WizardStage) -> None:
        logger.debug(
            "Session %s: %s -> %s",
            ctx.session_id, STAGE_NAMES[ctx.stage], STAGE_NAMES[stage],
        )
        ctx.stage = stage
        ctx.touch()

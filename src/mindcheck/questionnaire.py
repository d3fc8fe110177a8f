"""AdaptiveQuestionnaire — tracks position and escalation within a session.

The controller is stateless: position, answers and the escalation flag all
live on the :class:`SessionContext` passed into each call.  The active
question sequence is never stored; it is recomposed from the catalog via
``catalog.active_sequence(ctx.escalated)`` whenever it is needed.

Escalation rule:
    When the self-harm question is answered with a score at or above
    ``ESCALATION_THRESHOLD`` and the session has not escalated yet, the
    high-risk block is appended after the base questions.  Escalation is
    one-way: a later lower answer never removes the extra questions, and a
    second high answer never appends them again.
"""

from __future__ import annotations

import logging

from mindcheck.catalog import QuestionCatalog
from mindcheck.constants import ESCALATION_THRESHOLD, SELF_HARM_QID, UNSET_ANSWER
from mindcheck.models.question import AnswerValue, QuestionDefinition
from mindcheck.models.session import AnswerOutcome, SessionContext

logger = logging.getLogger(__name__)


def _as_score(value: AnswerValue) -> int:
    """Coerce an answer to a number for thresholding; non-numeric -> 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    return 0


class AdaptiveQuestionnaire:
    """Drives the question-by-question part of the wizard.

    Args:
        catalog: a loaded :class:`QuestionCatalog`
    """

    def __init__(self, catalog: QuestionCatalog) -> None:
        self._catalog = catalog

    @property
    def catalog(self) -> QuestionCatalog:
        return self._catalog

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def sequence(self, ctx: SessionContext) -> list[QuestionDefinition]:
        """The active question sequence for *ctx*."""
        return self._catalog.active_sequence(ctx.escalated)

    def current_question(self, ctx: SessionContext) -> QuestionDefinition:
        """The question at the current position.

        Raises ``RuntimeError`` if the stored position is outside the active
        sequence, which can only happen if the context was corrupted.
        """
        seq = self.sequence(ctx)
        if not 0 <= ctx.question_index < len(seq):
            raise RuntimeError(
                f"Question index {ctx.question_index} out of range "
                f"for sequence of length {len(seq)}"
            )
        return seq[ctx.question_index]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def submit_answer(
        self, ctx: SessionContext, qid: str, value: AnswerValue
    ) -> AnswerOutcome:
        """Record an answer for the current question and advance.

        Raises:
            ValueError: if *qid* is not the current question, or *value* is
                not one of its option values
        """
        current = self.current_question(ctx)
        if qid != current.id:
            raise ValueError(
                f"Answer for '{qid}' is only valid during its own turn; "
                f"current question is '{current.id}'"
            )
        if not current.accepts(value):
            raise ValueError(
                f"Invalid value {value!r} for question '{qid}'; "
                f"expected one of {current.values}"
            )

        value = current.canonical(value)
        ctx.answers[qid] = value

        escalated_now = False
        if (
            qid == SELF_HARM_QID
            and _as_score(value) >= ESCALATION_THRESHOLD
            and not ctx.escalated
        ):
            ctx.escalated = True
            escalated_now = True
            logger.info(
                "Session %s escalated: self-harm score %s >= %d",
                ctx.session_id, value, ESCALATION_THRESHOLD,
            )

        # Advance against the post-escalation sequence so the high-risk
        # block is reachable immediately.
        seq = self.sequence(ctx)
        ctx.touch()
        if ctx.question_index < len(seq) - 1:
            ctx.question_index += 1
            return AnswerOutcome(
                complete=False,
                next_question=seq[ctx.question_index],
                escalated=escalated_now,
            )
        return AnswerOutcome(complete=True, escalated=escalated_now)

    def reset(self, ctx: SessionContext) -> None:
        """Restore position 0, the base sequence and unset answers."""
        ctx.question_index = 0
        ctx.escalated = False
        ctx.answers = {qid: UNSET_ANSWER for qid in self._catalog.base_ids}
        ctx.touch()

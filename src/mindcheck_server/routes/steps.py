"""Step endpoints — read the current step and drive stage transitions.

Every transition endpoint returns the resulting ``WizardStep`` so the
client can render the next screen without a second round-trip.

Out-of-order calls (wrong stage, answering a question that is not the
current one) are rejected with 400 by the global ``ValueError`` handler.
"""

from typing import Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from mindcheck.models.session import SessionContext, WizardStep
from mindcheck.wizard import WellnessWizard

from mindcheck_server.dependencies import get_session, get_wizard

router = APIRouter(prefix="/sessions/{session_id}", tags=["steps"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class RegisterRequest(BaseModel):
    """Body for POST /sessions/{session_id}/register."""
    name: str = ""
    phone: str = ""
    guardian_phone: str = ""


class SubmitAnswerRequest(BaseModel):
    """Body for POST /sessions/{session_id}/answers.

    ``qid`` must be the question currently shown to the user.
    """
    qid: str
    value: Union[int, str]


class DescriptionRequest(BaseModel):
    """Body for POST /sessions/{session_id}/description."""
    text: str = ""


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("/step")
async def get_current_step(
    ctx: SessionContext = Depends(get_session),
    wizard: WellnessWizard = Depends(get_wizard),
) -> WizardStep:
    """Return the view for the session's current stage."""
    return wizard.current_step(ctx)


@router.post("/consent")
async def confirm_consent(
    ctx: SessionContext = Depends(get_session),
    wizard: WellnessWizard = Depends(get_wizard),
) -> WizardStep:
    """Consent -> Register."""
    return wizard.current_step(wizard.confirm_consent(ctx))


@router.post("/register")
async def register(
    body: RegisterRequest,
    ctx: SessionContext = Depends(get_session),
    wizard: WellnessWizard = Depends(get_wizard),
) -> WizardStep:
    """Register -> Home.  Returns 422 if name or phone is empty."""
    wizard.register(
        ctx,
        name=body.name,
        phone=body.phone,
        guardian_phone=body.guardian_phone,
    )
    return wizard.current_step(ctx)


@router.post("/start")
async def start_assessment(
    ctx: SessionContext = Depends(get_session),
    wizard: WellnessWizard = Depends(get_wizard),
) -> WizardStep:
    """Home -> Assessment; the response carries the first question."""
    return wizard.current_step(wizard.start_assessment(ctx))


@router.post("/answers")
async def submit_answer(
    body: SubmitAnswerRequest,
    ctx: SessionContext = Depends(get_session),
    wizard: WellnessWizard = Depends(get_wizard),
) -> WizardStep:
    """Answer the current question.

    The response carries the next question, or the Description stage once
    the last question has been answered.
    """
    wizard.submit_answer(ctx, qid=body.qid, value=body.value)
    return wizard.current_step(ctx)


@router.post("/description")
async def submit_description(
    body: DescriptionRequest,
    ctx: SessionContext = Depends(get_session),
    wizard: WellnessWizard = Depends(get_wizard),
) -> WizardStep:
    """Submit free-text notes and run the analysis.

    Resolves to Results, Crisis Intervention, or back to Description with
    ``error`` set if the analysis failed.
    """
    await wizard.submit_description(ctx, body.text)
    return wizard.current_step(ctx)


@router.post("/restart")
async def restart(
    ctx: SessionContext = Depends(get_session),
    wizard: WellnessWizard = Depends(get_wizard),
) -> WizardStep:
    """Results | Crisis Intervention -> Home, clearing assessment data."""
    return wizard.current_step(wizard.restart(ctx))


@router.post("/notification/ack")
async def acknowledge_notification(
    ctx: SessionContext = Depends(get_session),
    wizard: WellnessWizard = Depends(get_wizard),
) -> WizardStep:
    """Record out-of-band confirmation that the guardian was reached."""
    return wizard.current_step(wizard.acknowledge_notification(ctx))

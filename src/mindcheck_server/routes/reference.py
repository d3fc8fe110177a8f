"""Reference data endpoints — question catalog and wizard stages.

Read-only endpoints exposing the loaded catalog.  They don't require the
``X-User-ID`` header since the data is public.
"""

from fastapi import APIRouter, Depends

from mindcheck.catalog import QuestionCatalog
from mindcheck.models.question import QuestionDefinition
from mindcheck.models.session import WizardStage

from mindcheck_server.dependencies import get_catalog

router = APIRouter(prefix="/reference", tags=["reference"])


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("/questions")
def list_questions(
    catalog: QuestionCatalog = Depends(get_catalog),
) -> dict[str, list[QuestionDefinition]]:
    """Return the base and high-risk question blocks in catalog order."""
    return {
        "base": list(catalog.base),
        "high_risk": list(catalog.high_risk),
    }


@router.get("/stages")
def list_stages() -> list[dict]:
    """Return every wizard stage with its ordinal and display name."""
    return [
        {"id": stage.value, "key": stage.name.lower(), "name": stage.label}
        for stage in WizardStage
    ]

"""Classifier and notification result models.

``AnalysisResult`` mirrors the strict JSON schema the remote classifier is
asked to produce.  Parsing a response into this model is the only shape
check the SDK performs; internal consistency (e.g. probabilities summing to
one) is not validated.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from mindcheck.constants import HIGH_RISK_ALERT, HIGH_RISK_PREDICTION

Severity = Literal["Low", "Mild", "Moderate", "High"]


class NLPInsights(BaseModel):
    """Sentiment summary of the free-text notes."""

    model_config = ConfigDict(frozen=True)

    sentiment: Literal["Positive", "Neutral", "Negative", "Very Negative"]
    key_themes: List[str] = []


class AnalysisResult(BaseModel):
    """Immutable classification returned by the remote model.

    Probability fields are decimal numbers encoded as text (e.g. ``"0.9854"``).
    """

    model_config = ConfigDict(frozen=True)

    prediction: Literal["Suicidal", "Non-suicidal"]
    confidence: str
    suicidal_prob: str
    non_suicidal_prob: str

    overall_mood_level: Severity
    anxiety_concern: Severity
    risk_alert: Literal["None", "Monitor", "Immediate Support Suggested"]
    nlp_insights: NLPInsights
    supportive_message: str
    coping_suggestions: List[str]
    crisis_support: Optional[str] = None

    @field_validator("confidence", "suicidal_prob", "non_suicidal_prob", mode="before")
    @classmethod
    def _decimal_text(cls, v):
        # Models occasionally emit bare numbers despite the schema
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            v = str(v)
        if not isinstance(v, str):
            raise ValueError(f"expected a decimal encoded as text, got {v!r}")
        try:
            float(v)
        except ValueError:
            raise ValueError(f"expected a decimal encoded as text, got {v!r}") from None
        return v

    @property
    def is_high_risk(self) -> bool:
        """True if either high-risk marker is present."""
        return (
            self.risk_alert == HIGH_RISK_ALERT
            or self.prediction == HIGH_RISK_PREDICTION
        )


class NotificationResult(BaseModel):
    """Outcome of a guardian notification dispatch."""

    model_config = ConfigDict(frozen=True)

    delivered: bool
    channel: str
    detail: Optional[str] = None

"""GeminiClassifier — the analysis client behind the ``Classifier`` interface.

Formats the assessment into a prompt, calls Google Gemini with a strict JSON
response schema, and parses the reply into an :class:`AnalysisResult`.

The credential is read from the environment on every call, so a missing key
is a request-time failure rather than a startup failure.

Failure mapping (all are :class:`AnalysisError`)::

    no API key in env                      -> ConfigurationError
    SDK / network error                    -> ServiceError
    empty response text                    -> ServiceError
    invalid JSON or schema mismatch        -> ServiceError
"""

from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, Mapping

import pydantic
from google import genai
from google.genai import types

from mindcheck.constants import API_KEY_ENV_VARS, DEFAULT_MODEL
from mindcheck.errors import ConfigurationError, ServiceError
from mindcheck.interfaces import Classifier
from mindcheck.models.question import AnswerValue
from mindcheck.models.result import AnalysisResult
from mindcheck.prompt import PromptManager

logger = logging.getLogger(__name__)

_SEVERITIES = ["Low", "Mild", "Moderate", "High"]

# Response schema in the Gemini OpenAPI subset.  Field set and enums must
# stay in sync with AnalysisResult.
RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "prediction": {"type": "STRING", "enum": ["Suicidal", "Non-suicidal"]},
        "confidence": {"type": "STRING", "description": "Float as string, e.g. 0.9854"},
        "suicidal_prob": {"type": "STRING", "description": "Float as string, e.g. 0.9854"},
        "non_suicidal_prob": {"type": "STRING", "description": "Float as string, e.g. 0.0146"},
        "overall_mood_level": {"type": "STRING", "enum": _SEVERITIES},
        "anxiety_concern": {"type": "STRING", "enum": _SEVERITIES},
        "risk_alert": {
            "type": "STRING",
            "enum": ["None", "Monitor", "Immediate Support Suggested"],
        },
        "nlp_insights": {
            "type": "OBJECT",
            "properties": {
                "sentiment": {
                    "type": "STRING",
                    "enum": ["Positive", "Neutral", "Negative", "Very Negative"],
                },
                "key_themes": {"type": "ARRAY", "items": {"type": "STRING"}},
            },
        },
        "supportive_message": {"type": "STRING"},
        "coping_suggestions": {"type": "ARRAY", "items": {"type": "STRING"}},
        "crisis_support": {"type": "STRING"},
    },
    "required": [
        "prediction", "confidence", "suicidal_prob", "non_suicidal_prob",
        "overall_mood_level", "anxiety_concern", "risk_alert",
        "nlp_insights", "supportive_message", "coping_suggestions",
    ],
}

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def get_api_key() -> str | None:
    """Return the first non-empty credential from ``API_KEY_ENV_VARS``."""
    for name in API_KEY_ENV_VARS:
        value = os.getenv(name)
        if value:
            return value
    return None


def strip_code_fences(text: str) -> str:
    """Remove Markdown code-fence markers the model sometimes wraps JSON in."""
    return _FENCE_RE.sub("", text).strip()


def parse_analysis(text: str | None) -> AnalysisResult:
    """Parse raw model output into an :class:`AnalysisResult`.

    Raises:
        ServiceError: if *text* is empty, not JSON, or does not match the
            expected shape
    """
    if not text:
        raise ServiceError("No response received from the classifier")
    cleaned = strip_code_fences(text)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ServiceError(f"Classifier returned invalid JSON: {exc}") from exc
    try:
        return AnalysisResult.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ServiceError(
            f"Classifier response does not match the expected shape: "
            f"{exc.error_count()} error(s)"
        ) from exc


class GeminiClassifier(Classifier):
    """Classifier backed by the Google Gemini API.

    Args:
        model: Gemini model name
        client: optional pre-built ``genai.Client``; when omitted a client
            is created per call from the environment credential and closed afterwards
        prompts: optional :class:`PromptManager` override
        base_ids: question ids that must be present in every request
    """

    def __init__(
        self,
        *,
        model: str = DEFAULT_MODEL,
        client: Any | None = None,
        prompts: PromptManager | None = None,
        base_ids: list[str] | None = None,
    ) -> None:
        self._model = model
        self._client = client
        self._prompts = prompts or PromptManager()
        self._base_ids = list(base_ids or [])

    def _get_client(self) -> tuple[Any, bool]:
        """Return ``(client, owned)``; owned clients are closed after the call."""
        if self._client is not None:
            return self._client, False
        api_key = get_api_key()
        if not api_key:
            raise ConfigurationError(
                "Classifier API key is missing; set one of "
                + ", ".join(API_KEY_ENV_VARS)
            )
        return genai.Client(api_key=api_key), True

    async def classify(
        self, answers: Mapping[str, AnswerValue], free_text: str
    ) -> AnalysisResult:
        missing = [qid for qid in self._base_ids if qid not in answers]
        if missing:
            raise ValueError(f"Assessment is missing base question ids: {missing}")

        prompt = self._prompts.render_assessment(answers, free_text)
        client, owned = self._get_client()

        try:
            response = await client.aio.models.generate_content(
                model=self._model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    system_instruction=self._prompts.render_system_prompt(),
                    response_mime_type="application/json",
                    response_schema=RESPONSE_SCHEMA,
                ),
            )
        except Exception as exc:
            logger.error("Classifier call failed: %s", exc)
            raise ServiceError("Classifier call failed") from exc
        finally:
            if owned:
                await client.aio.aclose()

        result = parse_analysis(getattr(response, "text", None))
        logger.info(
            "Classifier result: prediction=%s risk_alert=%s",
            result.prediction, result.risk_alert,
        )
        return result

"""PromptManager — Jinja2-based prompt renderer for the remote classifier.

Loads templates from the ``template/`` directory and renders:

  - the fixed system directive (tone and safety rules)
  - the per-assessment request, which embeds every answer and the user's
    free-text notes
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

import jinja2

from mindcheck.constants import (
    ESCALATION_THRESHOLD,
    HIGH_RISK_ALERT,
    HIGH_RISK_PREDICTION,
)
from mindcheck.models.question import AnswerValue

# --- Prompt field name, question id, and rendering kind ---
# "scale" answers render as "n/3"; "token" answers render as JSON strings
# and fall back to "N/A" when the question was never asked.
PATIENT_FIELDS: list[tuple[str, str, str]] = [
    ("hopelessness_scale", "hopeless", "scale"),
    ("anxiety_scale", "anxiety", "scale"),
    ("social_withdrawal", "social_withdraw", "token"),
    ("sleep_quality", "sleep", "scale"),
    ("self_harm_thoughts", "self_harm", "scale"),
    ("has_plan", "plan", "token"),
    ("has_means", "means", "token"),
]

_SCALE_MAX = 3
_NOT_ASKED = "N/A"


class PromptManager:
    """Jinja2-based prompt renderer.

    Args:
        template_dir: optional override for the template directory.
            Defaults to ``template/`` sibling of this module.
    """

    def __init__(self, template_dir: Path | None = None) -> None:
        if template_dir is None:
            template_dir = Path(__file__).parent / "template"
        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters["tojson"] = lambda v: json.dumps(v, ensure_ascii=False)

    def render_system_prompt(self) -> str:
        """Render the fixed behavioural directive."""
        template = self._env.get_template("system_prompt.jinja2")
        return template.render(
            threshold=ESCALATION_THRESHOLD,
            high_risk_prediction=HIGH_RISK_PREDICTION,
            high_risk_alert=HIGH_RISK_ALERT,
        )

    def render_assessment(
        self, answers: Mapping[str, AnswerValue], notes: str
    ) -> str:
        """Render the request prompt for one assessment."""
        fields = [
            {"name": name, "value": self._format_value(answers.get(qid), kind)}
            for name, qid, kind in PATIENT_FIELDS
        ]
        template = self._env.get_template("assessment.jinja2")
        return template.render(fields=fields, notes=notes)

    def render(self, template_name: str, **context) -> str:
        """Render a named template with arbitrary context."""
        template = self._env.get_template(template_name)
        return template.render(**context)

    @staticmethod
    def _format_value(value: AnswerValue | None, kind: str) -> str:
        if kind == "scale":
            return f"{value}/{_SCALE_MAX}"
        if value is None:
            return json.dumps(_NOT_ASKED)
        return json.dumps(str(value), ensure_ascii=False)

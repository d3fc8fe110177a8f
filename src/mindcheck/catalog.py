"""QuestionCatalog — loads the question YAML into typed models.

This is the single source of truth for question data at runtime.  The
catalog is loaded once at startup and is never mutated afterwards; the
active question sequence of a session is composed from it on demand.

Usage::

    catalog = QuestionCatalog()     # defaults to the packaged questions.yaml
    catalog.load()

    catalog.active_sequence(escalated=False)   # 5 base questions
    catalog.active_sequence(escalated=True)    # base + plan, means
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from mindcheck.models.question import QuestionDefinition

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "questions.yaml"


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


class QuestionCatalog:
    """Immutable base and high-risk question blocks with lookup helpers.

    Attributes populated after :meth:`load`:

        base       — tuple[QuestionDefinition, ...] asked in every session
        high_risk  — tuple[QuestionDefinition, ...] appended on escalation
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path is not None else DEFAULT_CATALOG_PATH

        # Populated by load()
        self.base: tuple[QuestionDefinition, ...] = ()
        self.high_risk: tuple[QuestionDefinition, ...] = ()
        self._by_id: dict[str, QuestionDefinition] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Parse the catalog YAML.

        Raises ``FileNotFoundError`` if the file is missing and ``ValueError``
        if a question id appears twice across both blocks.
        """
        raw = load_yaml(self._path) or {}
        self.base = tuple(QuestionDefinition.model_validate(q) for q in raw.get("base", []))
        self.high_risk = tuple(
            QuestionDefinition.model_validate(q) for q in raw.get("high_risk", [])
        )
        if not self.base:
            raise ValueError(f"Question catalog {self._path} has no base questions")

        self._by_id = {}
        for q in self.base + self.high_risk:
            if q.id in self._by_id:
                raise ValueError(f"Duplicate question id in catalog: {q.id}")
            self._by_id[q.id] = q

        logger.info(
            "QuestionCatalog loaded: %d base, %d high-risk questions",
            len(self.base), len(self.high_risk),
        )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @property
    def base_ids(self) -> list[str]:
        return [q.id for q in self.base]

    @property
    def high_risk_ids(self) -> list[str]:
        return [q.id for q in self.high_risk]

    def get(self, qid: str) -> QuestionDefinition:
        """Return the question with *qid*.  Raises ``KeyError`` if unknown."""
        return self._by_id[qid]

    def active_sequence(self, escalated: bool) -> list[QuestionDefinition]:
        """Compose the question sequence for a session.

        The base block is always a prefix; the high-risk block follows it
        only when the session has escalated.
        """
        if escalated:
            return [*self.base, *self.high_risk]
        return list(self.base)

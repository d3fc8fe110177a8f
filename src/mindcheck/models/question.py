"""Question models for the self-assessment catalog.

Each question is a single-choice item: the user picks exactly one of the
listed options and the option's ``value`` is recorded as the answer.  Values
are either an integer severity (0-3) or a ``"Yes"``/``"No"`` token.

Models are frozen so catalog entries can be shared between sessions without
copying.
"""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict, model_validator

AnswerValue = Union[int, str]


class Option(BaseModel):
    """A selectable option with a display label and the recorded value."""

    model_config = ConfigDict(frozen=True)

    label: str
    value: AnswerValue


class QuestionDefinition(BaseModel):
    """A catalog question: stable id, prompt text, and ordered options."""

    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    subtext: str = ""
    options: tuple[Option, ...]

    @model_validator(mode="after")
    def _check_options(self) -> QuestionDefinition:
        if not self.options:
            raise ValueError(f"Question '{self.id}' must define at least one option")
        values = [o.value for o in self.options]
        if len(set(values)) != len(values):
            raise ValueError(f"Question '{self.id}' has duplicate option values")
        return self

    @property
    def values(self) -> list[AnswerValue]:
        """Allowed answer values in display order."""
        return [o.value for o in self.options]

    def accepts(self, value: AnswerValue) -> bool:
        """True if *value* is one of this question's option values."""
        # bool is an int subclass; True must not pass for 1
        if isinstance(value, bool):
            return False
        return value in self.values

    def canonical(self, value: AnswerValue) -> AnswerValue:
        """The option's own value equal to *value* (``2.0`` -> ``2``).

        Raises ``ValueError`` if *value* is not accepted.
        """
        if not self.accepts(value):
            raise ValueError(f"{value!r} is not an option of question '{self.id}'")
        return next(o.value for o in self.options if o.value == value)

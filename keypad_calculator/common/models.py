"""Pydantic models for keypad buttons and evaluation results."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Action(str, Enum):
    """Keypad actions that are not plain input tokens."""

    CLEAR = "clear"
    BACK = "back"
    EQUALS = "equals"


class Button(BaseModel):
    """
    A labeled keypad control.

    A button carries either a literal ``value`` appended to the expression
    (digit, operator symbol, decimal point, parenthesis) or an ``action``.
    """

    model_config = ConfigDict(frozen=True)

    label: str = Field(..., min_length=1, description="Text shown on the control")
    value: Optional[str] = Field(default=None, min_length=1, description="Token appended when pressed")
    action: Optional[Action] = Field(default=None, description="Engine action triggered when pressed")

    @model_validator(mode="after")
    def value_xor_action(self) -> "Button":
        """Ensure that exactly one of value or action is set."""
        if (self.value is None) == (self.action is None):
            raise ValueError("Button needs exactly one of 'value' or 'action'")
        return self


class EvaluationResult(BaseModel):
    """Represents the outcome of evaluating the current expression."""

    expression: str = Field(..., description="Expression text that was evaluated")
    value: Optional[float] = Field(default=None, description="Computed value, None on error")
    text: str = Field(..., description="Result rendered for the display, or the error marker")

    @property
    def is_error(self) -> bool:
        return self.value is None

"""Expression engine holding the calculator input and evaluating it."""
from enum import Enum
import math
import re
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from keypad_calculator.common.formatting import format_number
from keypad_calculator.common.logger import logger
from keypad_calculator.common.models import EvaluationResult
from keypad_calculator.common.parser import ExpressionParser


# Display symbols mapped to the ASCII operators stored in the expression
SYMBOL_MAP: Dict[str, str] = {
    "÷": "/",
    "×": "*",
    "−": "-",
}
_SYMBOL_TABLE = str.maketrans(SYMBOL_MAP)

# Characters the evaluator may receive
_DISALLOWED = re.compile(r"[^0-9+\-*/%.() ]")
# Operators delimiting numeric segments
_SEGMENT_SEPARATOR = re.compile(r"[+\-*/%]")


def normalize_symbols(text: str) -> str:
    """
    Replace display symbols (÷ × −) with their ASCII operators.

    :param str text: Raw input text

    :return: Text using ASCII operators only
    :rtype: str
    """
    return text.translate(_SYMBOL_TABLE)


class EngineState(str, Enum):
    """Whether the user is composing input or looking at an evaluation outcome."""

    EDITING = "editing"
    RESULT_SHOWN = "result_shown"


class ExpressionEngine(BaseModel):
    """
    Owns the expression being typed and the text shown on the display.

    Operations:
        - append: add a token, subject to the leading-zero and decimal-point guards
        - backspace: drop the last character
        - clear: empty the expression
        - evaluate: compute the expression and replace it with the result

    append, backspace and clear never fail. evaluate reports every failure
    as the error marker and empties the expression.
    """

    # Allow arbitrary callables for the evaluator and display hook
    model_config = ConfigDict(arbitrary_types_allowed=True)

    expression: str = Field(default="", description="Arithmetic input in progress")
    display: str = Field(default="0", description="Text currently shown on the display")
    state: EngineState = Field(default=EngineState.EDITING, description="Editing or showing a result")

    error_text: str = Field(default="Error", min_length=1, description="Display text for failed evaluations")
    empty_display: str = Field(default="0", min_length=1, description="Display text for an empty expression")
    evaluator: Callable[[str], float] = Field(
        default=ExpressionParser.evaluate, description="Computes a whitelisted arithmetic string"
    )
    on_display: Optional[Callable[[str], None]] = Field(
        default=None, description="Called with the new display text on every refresh"
    )

    def model_post_init(self, __context: Any) -> None:
        """Show the initial expression, or the empty placeholder."""
        self.display = self.expression or self.empty_display

    def _show(self, text: str) -> None:
        self.display = text
        if self.on_display is not None:
            self.on_display(text)

    def _refresh(self) -> None:
        """Show the current expression, or the empty placeholder."""
        self.state = EngineState.EDITING
        self._show(self.expression or self.empty_display)

    def append(self, token: str) -> None:
        """
        Append a digit, decimal point, operator or parenthesis to the expression.

        The append is silently skipped when it would produce a second leading
        zero ("00") or a second decimal point in the current number.

        :param str token: Input token, display symbols allowed

        :return: None
        """
        token = normalize_symbols(token)

        if self.expression == "0" and token == "0":
            logger.debug("Skipped redundant leading zero")
            return

        if token == ".":
            segment = _SEGMENT_SEPARATOR.split(self.expression)[-1]
            if "." in segment:
                logger.debug(f"Skipped second decimal point in {segment!r}")
                return

        self.expression += token
        self._refresh()

    def backspace(self) -> None:
        """Remove the last character of the expression, if any."""
        self.expression = self.expression[:-1]
        self._refresh()

    def clear(self) -> None:
        """Reset the expression to empty."""
        self.expression = ""
        self._refresh()

    def _fail(self, source: str, reason: str) -> EvaluationResult:
        logger.warning(f"🧮❌ Invalid expression {source!r}: {reason}")
        self.expression = ""
        self.state = EngineState.RESULT_SHOWN
        self._show(self.error_text)
        return EvaluationResult(expression=source, text=self.error_text)

    def evaluate(self) -> EvaluationResult:
        """
        Evaluate the current expression and show the outcome.

        Steps:
            1. Treat an empty expression as "0".
            2. Replace display symbols with ASCII operators.
            3. Reject any character outside digits, ``+ - * / % . ( )`` and space,
               without calling the evaluator.
            4. Call the evaluator.
            5. Reject infinite and nan results.

        On success the expression becomes the result text. On failure it is
        emptied and the display shows the error marker.

        :return: Outcome of the evaluation
        :rtype: EvaluationResult
        """
        source: str = self.expression or "0"
        clean: str = normalize_symbols(source)

        match = _DISALLOWED.search(clean)
        if match is not None:
            return self._fail(source, f"disallowed character {match.group()!r}")

        try:
            value = float(self.evaluator(clean))
        except Exception as exc:
            return self._fail(source, str(exc))

        if not math.isfinite(value):
            return self._fail(source, f"non-finite result {value}")

        text: str = format_number(value)
        logger.info(f"🧮✅ {source} = {text}")

        self.expression = text
        self.state = EngineState.RESULT_SHOWN
        self._show(text)
        return EvaluationResult(expression=source, value=value, text=text)

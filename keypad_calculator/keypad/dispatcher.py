"""Route keypad buttons and keyboard keys to expression engine operations."""
from typing import Callable, Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from keypad_calculator.common.logger import logger
from keypad_calculator.common.models import Action, Button
from keypad_calculator.engine.engine import ExpressionEngine


# Keyboard keys appended verbatim to the expression
INPUT_KEYS: Tuple[str, ...] = tuple("0123456789") + (".", "+", "-", "*", "/", "%", "(", ")")

# Named keyboard keys mapped to actions
ACTION_KEYS: Dict[str, Action] = {
    "Backspace": Action.BACK,
    "Escape": Action.CLEAR,
    "Enter": Action.EQUALS,
}

# Standard keypad, row by row
DEFAULT_LAYOUT: List[Button] = [
    Button(label="C", action=Action.CLEAR),
    Button(label="⌫", action=Action.BACK),
    Button(label="(", value="("),
    Button(label=")", value=")"),
    Button(label="7", value="7"),
    Button(label="8", value="8"),
    Button(label="9", value="9"),
    Button(label="÷", value="÷"),
    Button(label="4", value="4"),
    Button(label="5", value="5"),
    Button(label="6", value="6"),
    Button(label="×", value="×"),
    Button(label="1", value="1"),
    Button(label="2", value="2"),
    Button(label="3", value="3"),
    Button(label="−", value="−"),
    Button(label="0", value="0"),
    Button(label=".", value="."),
    Button(label="%", value="%"),
    Button(label="+", value="+"),
    Button(label="=", action=Action.EQUALS),
]


class KeypadDispatcher(BaseModel):
    """
    Single entry point for input events.

    Buttons carry either a value to append or an action; keyboard keys are
    looked up in INPUT_KEYS and ACTION_KEYS. Each event runs to completion
    on the engine before returning.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    engine: ExpressionEngine = Field(default_factory=ExpressionEngine, description="Engine receiving the input")
    layout: List[Button] = Field(default_factory=lambda: list(DEFAULT_LAYOUT), description="Available buttons")

    def _handlers(self) -> Dict[Action, Callable[[], object]]:
        return {
            Action.CLEAR: self.engine.clear,
            Action.BACK: self.engine.backspace,
            Action.EQUALS: self.engine.evaluate,
        }

    def dispatch(self, action: Action) -> None:
        """
        Run the engine operation bound to an action.

        :param Action action: Action to perform

        :return: None
        """
        self._handlers()[Action(action)]()

    def press(self, button: Button) -> None:
        """
        Handle activation of a keypad button.

        :param Button button: Activated button

        :return: None
        """
        if button.action is not None:
            self.dispatch(button.action)
        else:
            self.engine.append(button.value)

    def press_label(self, label: str) -> None:
        """
        Press the layout button showing the given label.

        :param str label: Button label, e.g. "7" or "÷"

        :return: None
        :raises KeyError: If no button has this label
        """
        for button in self.layout:
            if button.label == label:
                self.press(button)
                return
        raise KeyError(f"No button labeled {label!r}")

    def press_key(self, key: str) -> bool:
        """
        Handle a keyboard key press.

        :param str key: Key name, a single character or Backspace/Escape/Enter

        :return: True if the host should suppress the key's default behavior
        :rtype: bool
        """
        if key in INPUT_KEYS:
            self.engine.append(key)
            return False

        action = ACTION_KEYS.get(key)
        if action is None:
            logger.debug(f"⌨️ Ignored key {key!r}")
            return False

        self.dispatch(action)
        # Only Enter has a default action to suppress
        return action is Action.EQUALS

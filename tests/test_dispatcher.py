"""Test class KeypadDispatcher."""
import pytest

from keypad_calculator.common.models import Action, Button
from keypad_calculator.engine.engine import ExpressionEngine
from keypad_calculator.keypad.dispatcher import DEFAULT_LAYOUT, KeypadDispatcher


@pytest.fixture
def dispatcher() -> KeypadDispatcher:
    """Create a dispatcher with a fresh engine and the default layout."""
    return KeypadDispatcher()


def test_keys_build_expression(dispatcher: KeypadDispatcher) -> None:
    """Digit, operator and parenthesis keys are appended."""
    for key in "(1.5+2)*3-4/2%5":
        assert dispatcher.press_key(key) is False
    assert dispatcher.engine.expression == "(1.5+2)*3-4/2%5"


def test_double_star_key_is_exponent(dispatcher: KeypadDispatcher) -> None:
    """Two * key presses in a row raise to a power."""
    for key in "2**10":
        dispatcher.press_key(key)
    dispatcher.press_key("Enter")
    assert dispatcher.engine.display == "1024"


def test_doubled_minus_key_is_error(dispatcher: KeypadDispatcher) -> None:
    """Two - key presses in a row do not cancel out."""
    for key in "2--3":
        dispatcher.press_key(key)
    dispatcher.press_key("Enter")
    assert dispatcher.engine.display == "Error"


def test_enter_evaluates_and_suppresses_default(dispatcher: KeypadDispatcher) -> None:
    """Enter evaluates and asks the host to suppress its default action."""
    for key in "6*7":
        dispatcher.press_key(key)
    assert dispatcher.press_key("Enter") is True
    assert dispatcher.engine.display == "42"


def test_backspace_and_escape(dispatcher: KeypadDispatcher) -> None:
    """Backspace deletes the last character, Escape clears everything."""
    for key in "123":
        dispatcher.press_key(key)
    assert dispatcher.press_key("Backspace") is False
    assert dispatcher.engine.expression == "12"
    assert dispatcher.press_key("Escape") is False
    assert dispatcher.engine.expression == ""


@pytest.mark.parametrize("key", ["a", "Shift", "=", "÷", " ", "Tab"])
def test_unknown_keys_are_ignored(dispatcher: KeypadDispatcher, key: str) -> None:
    """Keys outside the key table change nothing."""
    dispatcher.press_key("7")
    assert dispatcher.press_key(key) is False
    assert dispatcher.engine.expression == "7"


def test_press_value_button(dispatcher: KeypadDispatcher) -> None:
    """Value buttons append their normalized value."""
    dispatcher.press(Button(label="9", value="9"))
    dispatcher.press(Button(label="÷", value="÷"))
    dispatcher.press(Button(label="3", value="3"))
    assert dispatcher.engine.expression == "9/3"


@pytest.mark.parametrize("labels,expected", [
    (["7", "×", "6", "="], "42"),
    (["1", "2", "⌫", "="], "1"),
    (["1", "÷", "0", "="], "Error"),
    (["5", "C"], "0"),
    (["(", "2", "−", "5", ")", "%", "2", "="], "-1"),
])
def test_press_labels(dispatcher: KeypadDispatcher, labels, expected: str) -> None:
    """Default layout buttons drive the engine like the on-screen keypad."""
    for label in labels:
        dispatcher.press_label(label)
    assert dispatcher.engine.display == expected


def test_press_unknown_label(dispatcher: KeypadDispatcher) -> None:
    """Pressing a label missing from the layout raises KeyError."""
    with pytest.raises(KeyError):
        dispatcher.press_label("√")


@pytest.mark.parametrize("action", [Action.EQUALS, "equals"])
def test_dispatch_accepts_enum_or_tag(dispatcher: KeypadDispatcher, action) -> None:
    """dispatch accepts an Action or its string tag."""
    dispatcher.press_key("3")
    dispatcher.dispatch(action)
    assert dispatcher.engine.expression == "3"
    assert dispatcher.engine.display == "3"


def test_dispatch_unknown_tag(dispatcher: KeypadDispatcher) -> None:
    """An unknown action tag raises ValueError."""
    with pytest.raises(ValueError):
        dispatcher.dispatch("square")


def test_shared_engine() -> None:
    """The dispatcher drives the engine instance it was given."""
    engine = ExpressionEngine()
    dispatcher = KeypadDispatcher(engine=engine)
    dispatcher.press_key("8")
    assert engine.expression == "8"


def test_default_layout() -> None:
    """The default keypad has unique labels, all actions and all digits."""
    labels = [button.label for button in DEFAULT_LAYOUT]
    assert len(labels) == len(set(labels))
    assert {button.action for button in DEFAULT_LAYOUT if button.action} == set(Action)
    assert set("0123456789") <= set(labels)

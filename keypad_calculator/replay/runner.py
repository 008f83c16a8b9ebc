"""Replay recorded key sessions through a fresh expression engine each."""
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field

from keypad_calculator.common.logger import logger
from keypad_calculator.engine.engine import SYMBOL_MAP
from keypad_calculator.keypad.dispatcher import KeypadDispatcher
from keypad_calculator.replay.loader import SESSION_ACTIONS


def play_keys(dispatcher: KeypadDispatcher, session: str) -> str:
    """
    Press every key of a session on the given keypad and return the final display.

    Spaces are ignored, ``=``, ``C`` and ``<`` are equals, clear and
    backspace, display symbols (÷ × −) press the layout button with that
    label and every other character is a keyboard key.

    :param KeypadDispatcher dispatcher: Keypad receiving the keys
    :param str session: Session text, e.g. "12÷4="

    :return: Display text after the last key
    :rtype: str
    """
    for char in session:
        if char.isspace():
            continue
        if char in SESSION_ACTIONS:
            dispatcher.dispatch(SESSION_ACTIONS[char])
        elif char in SYMBOL_MAP:
            dispatcher.press_label(char)
        else:
            dispatcher.press_key(char)
    return dispatcher.engine.display


def replay_session(session: str) -> str:
    """Replay a session on a fresh keypad."""
    return play_keys(KeypadDispatcher(), session)


class SessionRunner(BaseModel):
    """Replays sessions and writes one ``<session> -> <display>`` line per session."""

    output_file: Path = Field(..., description="Path to write the display trace")

    def run(self, sessions: List[str]) -> List[str]:
        """
        Replay all sessions, writing each trace line as soon as it is known.

        :param List[str] sessions: Session lines

        :return: Final display of every session, in order
        :rtype: List[str]
        """
        logger.info(f"🔁 Replaying {len(sessions)} session(s) into {self.output_file}")
        displays: List[str] = []
        with self.output_file.open("w", encoding="utf-8") as f_out:
            for line_number, session in enumerate(sessions, start=1):
                display = replay_session(session)
                displays.append(display)
                f_out.write(f"{session} -> {display}\n")
                f_out.flush()
                logger.debug(f"🔁 Session {line_number}: {session} -> {display}")
        logger.info("🔁✅ Replay finished")
        return displays

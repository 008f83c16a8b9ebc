"""
Command-line entrypoint for the keypad calculator.

Three modes:
- keys given as arguments: press them in order and print the final display
- --replay PATH: replay a session file or archive and write a results file
- neither: interactive loop, one line of keys at a time on a single keypad
"""

import argparse
from pathlib import Path
import sys
from typing import List, Literal, Optional, TextIO

from pydantic import BaseModel, Field, FilePath, ValidationError, model_validator

from keypad_calculator.common.logger import logger, set_level
from keypad_calculator.keypad.dispatcher import KeypadDispatcher
from keypad_calculator.replay.loader import load_sessions
from keypad_calculator.replay.runner import SessionRunner, play_keys


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    keys : List[str]
        Key names pressed in order (single characters, Enter, Backspace, Escape).
    replay : Optional[FilePath]
        Session file or archive to replay.
    log_level : str
        Logging level of the shared logger.
    """

    keys: List[str] = Field(default_factory=list)
    replay: Optional[FilePath] = None
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    @model_validator(mode="after")
    def keys_or_replay(self) -> "CliArgs":
        """Ensure that keys and --replay are not combined."""
        if self.keys and self.replay is not None:
            raise ValueError("Pass either keys or --replay, not both")
        return self


def parse_args(argv: Optional[List[str]] = None) -> CliArgs:
    """
    Parse and validate command-line arguments.

    :param argv: Arguments to parse, defaults to sys.argv[1:]

    :return: Validated CLI arguments
    :rtype: CliArgs
    """
    parser = argparse.ArgumentParser(description="Keypad arithmetic calculator")

    parser.add_argument(
        "keys",
        nargs="*",
        help="Keys to press, e.g. 1 2 + 3 Enter",
    )
    parser.add_argument(
        "--replay",
        help="Path to a .txt, .zip, .tar.xz or .7z file with one key session per line",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    args = parser.parse_args(argv)

    try:
        return CliArgs(keys=args.keys, replay=args.replay, log_level=args.log_level.upper())
    except ValidationError as exc:
        parser.error(str(exc))


def build_output_path(input_path: Path) -> Path:
    """
    Construct the results file path for a replayed session file.

    - Preserves the original folder
    - Replaces dots in extensions with underscores
    - Appends '_results.txt' at the end

    Examples
    --------
    input: sessions/keys.7z
    output: sessions/keys_7z_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    # Path.stem only drops the last suffix, so strip all of them
    base = input_path.name[: -len("".join(input_path.suffixes))] if input_path.suffixes else input_path.name
    suffix_safe = "".join(input_path.suffixes).replace(".", "_")
    return input_path.with_name(f"{base}{suffix_safe}_results.txt")


def run_interactive(stdin: TextIO, stdout: TextIO) -> None:
    """
    Read key sessions line by line and print the display after each line.

    All lines act on the same keypad, so a result can be continued on the next line.
    """
    dispatcher = KeypadDispatcher()
    stdout.write(f"{dispatcher.engine.display}\n")
    for line in stdin:
        stdout.write(f"{play_keys(dispatcher, line)}\n")
        stdout.flush()


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main function of the keypad-calculator command.
    """
    cli_args = parse_args(argv)
    set_level(cli_args.log_level)

    if cli_args.replay is not None:
        input_path: Path = Path(cli_args.replay)
        try:
            sessions: List[str] = load_sessions(input_path)
        except ValueError as exc:
            logger.error(f"📄❌ Cannot read sessions from {input_path}: {exc}")
            raise SystemExit(2) from exc

        output_path: Path = build_output_path(input_path)
        SessionRunner(output_file=output_path).run(sessions)
        print(output_path)
        return

    if cli_args.keys:
        dispatcher = KeypadDispatcher()
        for key in cli_args.keys:
            dispatcher.press_key(key)
        print(dispatcher.engine.display)
        return

    run_interactive(sys.stdin, sys.stdout)


if __name__ == "__main__":
    main()

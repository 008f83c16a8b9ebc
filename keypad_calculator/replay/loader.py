"""Read recorded key sessions from text files or archives."""
from contextlib import contextmanager
import io
from pathlib import Path
import tarfile
import tempfile
from typing import Dict, FrozenSet, Iterator, List, TextIO
import zipfile

import py7zr
from pydantic import FilePath

from keypad_calculator.common.models import Action
from keypad_calculator.engine.engine import SYMBOL_MAP
from keypad_calculator.keypad.dispatcher import INPUT_KEYS


# Session characters standing for action keys
SESSION_ACTIONS: Dict[str, Action] = {
    "=": Action.EQUALS,
    "C": Action.CLEAR,
    "<": Action.BACK,
}

# Every character a session line may contain
SESSION_ALPHABET: FrozenSet[str] = frozenset(INPUT_KEYS) | frozenset(SYMBOL_MAP) | frozenset(SESSION_ACTIONS) | {" "}


def _first_txt(names: List[str], kind: str) -> str:
    txt_names = [name for name in names if name.endswith(".txt")]
    if not txt_names:
        raise ValueError(f"📄❌ No .txt file found in {kind} archive")
    return txt_names[0]


@contextmanager
def open_sessions(source: FilePath) -> Iterator[TextIO]:
    """
    Open the session text of a file or archive as a text stream.

    Supported sources:
    - .txt, read directly
    - .zip and .tar.xz, the first .txt member is streamed without extraction
    - .7z, the first .txt member is extracted to a temporary directory

    :param FilePath source: Path to the session file or archive

    :return: Context manager yielding a UTF-8 text stream
    :rtype: Iterator[TextIO]
    :raises ValueError: If no .txt file is found or format is unsupported
    """
    if source.suffix == ".txt":
        with source.open(encoding="utf-8") as stream:
            yield stream

    elif source.suffix == ".zip":
        with zipfile.ZipFile(source, "r") as zf:
            name = _first_txt(zf.namelist(), "zip")
            with io.TextIOWrapper(zf.open(name), encoding="utf-8") as stream:
                yield stream

    elif source.suffixes[-2:] == [".tar", ".xz"]:
        with tarfile.open(source, "r:xz") as tf:
            members = {member.name: member for member in tf.getmembers() if member.isfile()}
            name = _first_txt(list(members), "tar.xz")
            with io.TextIOWrapper(tf.extractfile(members[name]), encoding="utf-8") as stream:
                yield stream

    elif source.suffix == ".7z":
        # py7zr only decompresses to disk
        with py7zr.SevenZipFile(source, mode="r") as archive, tempfile.TemporaryDirectory() as tmpdir:
            name = _first_txt(archive.getnames(), "7z")
            archive.extract(path=tmpdir, targets=[name])
            with (Path(tmpdir) / name).open(encoding="utf-8") as stream:
                yield stream

    else:
        raise ValueError(f"📄❌ Unsupported session source: {source.suffix}")


def check_session(session: str, line_number: int) -> str:
    """
    Validate one session line against the session alphabet.

    :param str session: Stripped session line
    :param int line_number: Line number in the source, for error messages

    :return: The session, unchanged
    :rtype: str
    :raises ValueError: If the line contains a character no key produces
    """
    unknown = sorted(set(session) - SESSION_ALPHABET)
    if unknown:
        raise ValueError(f"📄❌ Line {line_number}: unknown key(s) {''.join(unknown)!r} in {session!r}")
    return session


def iter_sessions(source: FilePath) -> Iterator[str]:
    """
    Yield the non-empty, validated session lines of a file or archive.

    :param FilePath source: Path to a .txt file or a supported archive

    :return: Iterator over stripped session lines
    :rtype: Iterator[str]
    :raises ValueError: On unsupported sources or invalid session lines
    """
    with open_sessions(source) as stream:
        for line_number, line in enumerate(stream, start=1):
            session = line.strip()
            if session:
                yield check_session(session, line_number)


def load_sessions(source: FilePath) -> List[str]:
    """Read all sessions up front so format errors surface before any replay."""
    return list(iter_sessions(source))

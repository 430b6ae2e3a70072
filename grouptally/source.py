import codecs
from pathlib import Path
from typing import TextIO

from grouptally.errors import ConfigurationError, SourceNotFoundError


def check_delimiter(delimiter: str) -> str:
    if len(delimiter) != 1:
        raise ConfigurationError(f"delimiter must be a single character, got {delimiter!r}")
    return delimiter


def check_encoding(encoding: str) -> str:
    try:
        codecs.lookup(encoding)
    except LookupError as exc:
        raise ConfigurationError(f"unknown encoding: {encoding!r}") from exc
    return encoding


def open_source(path: str | Path, *, encoding: str = "utf-8") -> TextIO:
    input_path = Path(path)
    try:
        # newline="" lets the csv module handle quoted line breaks.
        return input_path.open("r", encoding=check_encoding(encoding), newline="")
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError, PermissionError) as exc:
        raise SourceNotFoundError(f"input file not found or not readable: {input_path}") from exc

from collections.abc import Callable
from pathlib import Path

import pytest

from grouptally.aggregator import Aggregator
from grouptally.diagnostics import CollectingSink


@pytest.fixture()
def header() -> str:
    return "ID,Name,Department,Salary\n"


@pytest.fixture()
def employees(header: str) -> str:
    return (
        header
        + "1,Alice,Engineering,90000\n"
        + "2,Bob,Sales,80000\n"
        + "3,Charlie,Engineering,95000\n"
        + "4,David,HR,70000\n"
        + "5,Eve,Sales,82000\n"
    )


@pytest.fixture()
def temp_workspace(tmp_path: Path) -> Path:
    (tmp_path / "data" / "input").mkdir(parents=True, exist_ok=True)
    return tmp_path


@pytest.fixture()
def write_input(temp_workspace: Path) -> Callable[[str, str], Path]:
    def _write(content: str, name: str = "records.csv") -> Path:
        input_file = temp_workspace / "data" / "input" / name
        input_file.write_text(content, encoding="utf-8")
        return input_file

    return _write


@pytest.fixture()
def sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture()
def aggregator(sink: CollectingSink) -> Aggregator:
    return Aggregator(sink)

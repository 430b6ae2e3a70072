import logging

import pytest

from grouptally.diagnostics import CollectingSink
from grouptally.errors import AggregationError, RowValidationError
from grouptally.row_parser import parse_row, skip_row, validate_row
from grouptally.schemas import Record, SkippedRow


def test_valid_row_trims_name_and_group() -> None:
    sink = CollectingSink()

    parsed = parse_row([" 7 ", "  Ada Lovelace ", " Engineering  ", " 120000.50 "], 2, sink)

    assert parsed == Record(identifier=7, name="Ada Lovelace", group="Engineering", amount=120000.5)
    assert sink.events == []


@pytest.mark.parametrize(
    ("fields", "reason"),
    [
        (["1", "Alice", "Engineering"], "expected 4 fields, got 3"),
        (["1", "Alice", "Engineering", "90000", "extra"], "expected 4 fields, got 5"),
        (["one", "Alice", "Engineering", "90000"], "identifier must be an integer"),
        (["1.5", "Alice", "Engineering", "90000"], "identifier must be an integer"),
        (["1", "Alice", "Engineering", "Eighty Thousand"], "amount must be a number"),
        (["1", "Alice", "Engineering", "-1"], "amount must be non-negative"),
        (["1", "Alice", "Engineering", "nan"], "amount must be finite"),
        (["1", "Alice", "Engineering", "inf"], "amount must be finite"),
        (["1", "   ", "Engineering", "90000"], "name is required"),
        (["1", "Alice", "", "90000"], "group is required"),
    ],
)
def test_invalid_rows_are_skipped_with_reason(fields: list[str], reason: str) -> None:
    sink = CollectingSink()

    parsed = parse_row(fields, 4, sink)

    assert isinstance(parsed, SkippedRow)
    assert parsed.row_number == 4
    assert parsed.raw_row == tuple(fields)
    assert reason in parsed.reason

    assert len(sink.events) == 1
    event = sink.events[0]
    assert event.level == logging.WARNING
    assert event.row_number == 4
    assert event.raw_row == tuple(fields)
    assert reason in event.message


def test_zero_amount_is_valid() -> None:
    parsed = parse_row(["9", "Intern", "Ops", "0"], 2, CollectingSink())

    assert isinstance(parsed, Record)
    assert parsed.amount == 0.0


def test_validate_row_raises_row_validation_error() -> None:
    with pytest.raises(RowValidationError):
        validate_row(["x", "Alice", "Engineering", "1"])


def test_row_validation_error_is_not_a_fatal_error() -> None:
    assert not issubclass(RowValidationError, AggregationError)


def test_skip_row_records_reason_for_rows_that_could_not_be_split() -> None:
    sink = CollectingSink()

    skipped = skip_row((), 6, "unparseable row: field larger than field limit (131072)", sink)

    assert skipped == SkippedRow(row_number=6, raw_row=(), reason="unparseable row: field larger than field limit (131072)")
    assert sink.events[0].level == logging.WARNING
    assert sink.events[0].row_number == 6

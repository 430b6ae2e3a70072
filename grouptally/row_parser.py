from collections.abc import Sequence
import logging
import math

from grouptally.diagnostics import DiagnosticEvent, DiagnosticSink
from grouptally.errors import RowValidationError
from grouptally.schemas import Record, SkippedRow


EXPECTED_FIELD_COUNT = 4


def _parse_identifier(raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise RowValidationError(f"identifier must be an integer, got {raw!r}") from exc


def _parse_amount(raw: str) -> float:
    try:
        amount = float(raw.strip())
    except ValueError as exc:
        raise RowValidationError(f"amount must be a number, got {raw!r}") from exc

    # float() accepts "nan" and "inf".
    if not math.isfinite(amount):
        raise RowValidationError(f"amount must be finite, got {raw!r}")
    if amount < 0:
        raise RowValidationError(f"amount must be non-negative, got {raw!r}")
    return amount


def _require_text(raw: str, field_name: str) -> str:
    value = raw.strip()
    if not value:
        raise RowValidationError(f"{field_name} is required")
    return value


def validate_row(fields: Sequence[str]) -> Record:
    if len(fields) != EXPECTED_FIELD_COUNT:
        raise RowValidationError(f"expected {EXPECTED_FIELD_COUNT} fields, got {len(fields)}")

    identifier_raw, name_raw, group_raw, amount_raw = fields
    identifier = _parse_identifier(identifier_raw)
    name = _require_text(name_raw, "name")
    group = _require_text(group_raw, "group")
    amount = _parse_amount(amount_raw)
    return Record(identifier=identifier, name=name, group=group, amount=amount)


def skip_row(raw_row: Sequence[str], row_number: int, reason: str, sink: DiagnosticSink) -> SkippedRow:
    skipped = SkippedRow(row_number=row_number, raw_row=tuple(raw_row), reason=reason)
    sink.emit(
        DiagnosticEvent(
            level=logging.WARNING,
            message=f"skipping row {row_number}: {reason}",
            row_number=row_number,
            raw_row=skipped.raw_row,
        )
    )
    return skipped


def parse_row(fields: Sequence[str], row_number: int, sink: DiagnosticSink) -> Record | SkippedRow:
    try:
        return validate_row(fields)
    except RowValidationError as exc:
        return skip_row(fields, row_number, str(exc), sink)

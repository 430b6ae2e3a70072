from collections.abc import Iterable, Iterator, Sequence
import csv
import logging
from pathlib import Path
from types import MappingProxyType
from typing import TextIO

from grouptally.diagnostics import DiagnosticEvent, DiagnosticSink
from grouptally.errors import (
    AggregationError,
    EmptySourceError,
    HeaderOnlyError,
    ProcessingError,
)
from grouptally.row_parser import parse_row, skip_row
from grouptally.schemas import AggregationResult, Record, SkippedRow
from grouptally.source import check_delimiter, check_encoding, open_source


READ_ERRORS = (OSError, UnicodeDecodeError)


class _Accumulator:
    def __init__(self) -> None:
        self.total_amount = 0.0
        self.top_record: Record | None = None
        self.group_sums: dict[str, float] = {}
        self.group_counts: dict[str, int] = {}
        self.valid_count = 0
        self.skipped_count = 0

    def add(self, record: Record) -> None:
        self.valid_count += 1
        self.total_amount += record.amount
        self.group_sums[record.group] = self.group_sums.get(record.group, 0.0) + record.amount
        self.group_counts[record.group] = self.group_counts.get(record.group, 0) + 1
        # Strictly greater, so the earliest record wins a tie.
        if self.top_record is None or record.amount > self.top_record.amount:
            self.top_record = record

    def skip(self) -> None:
        self.skipped_count += 1

    def result(self) -> AggregationResult:
        group_averages = {
            group: round(total / self.group_counts[group], 2) for group, total in self.group_sums.items()
        }
        return AggregationResult(
            total_amount=round(self.total_amount, 2),
            top_record=self.top_record,
            group_averages=MappingProxyType(group_averages),
            valid_count=self.valid_count,
            skipped_count=self.skipped_count,
        )


def _numbered_rows(
    rows: Iterable[Sequence[str]], location: str
) -> Iterator[tuple[int, Sequence[str], str | None]]:
    """Yield (row_number, fields, parse_error) for every non-blank row.

    A row the csv module cannot split comes back with no fields and the parse
    error text; the reader carries on from the next line.
    """
    iterator = iter(rows)
    row_number = 0
    while True:
        try:
            fields = next(iterator)
        except StopIteration:
            return
        except csv.Error as exc:
            row_number += 1
            yield row_number, (), f"unparseable row: {exc}"
            continue
        except READ_ERRORS as exc:
            raise ProcessingError(f"failed reading {location} after row {row_number}", exc) from exc

        row_number += 1
        # Blank lines are not rows.
        if not fields:
            continue
        yield row_number, fields, None


class Aggregator:
    def __init__(self, sink: DiagnosticSink, *, delimiter: str = ",", encoding: str = "utf-8") -> None:
        self.sink = sink
        self.delimiter = check_delimiter(delimiter)
        self.encoding = check_encoding(encoding)

    def aggregate_file(self, path: str | Path) -> AggregationResult:
        location = str(path)
        try:
            stream = open_source(path, encoding=self.encoding)
        except AggregationError as exc:
            self._emit_failure(location, exc)
            raise
        return self.aggregate_stream(stream, location)

    def aggregate_stream(self, stream: TextIO, location: str | None = None) -> AggregationResult:
        """Aggregate a text stream, closing it on every exit path."""
        if location is None:
            location = str(getattr(stream, "name", "<stream>"))
        with stream:
            return self.aggregate_rows(csv.reader(stream, delimiter=self.delimiter), location)

    def aggregate_rows(self, rows: Iterable[Sequence[str]], location: str = "<rows>") -> AggregationResult:
        try:
            return self._aggregate(rows, location)
        except AggregationError as exc:
            self._emit_failure(location, exc)
            raise

    def _aggregate(self, rows: Iterable[Sequence[str]], location: str) -> AggregationResult:
        numbered = _numbered_rows(rows, location)

        first = next(numbered, None)
        if first is None:
            raise EmptySourceError(f"input has no rows: {location}")
        # An unparseable header still counts as the header.
        _, header, _ = first

        self.sink.emit(
            DiagnosticEvent(
                level=logging.INFO,
                message="aggregation started",
                context={"location": location, "header": list(header)},
            )
        )

        accumulator = _Accumulator()
        for row_number, fields, parse_error in numbered:
            if parse_error is not None:
                parsed = skip_row(fields, row_number, parse_error, self.sink)
            else:
                parsed = parse_row(fields, row_number, self.sink)

            if isinstance(parsed, SkippedRow):
                accumulator.skip()
            else:
                accumulator.add(parsed)

        if accumulator.valid_count == 0 and accumulator.skipped_count == 0:
            raise HeaderOnlyError(f"input has a header but no data rows: {location}")

        result = accumulator.result()
        self.sink.emit(
            DiagnosticEvent(
                level=logging.INFO,
                message="aggregation finished",
                context={
                    "location": location,
                    "valid_count": result.valid_count,
                    "skipped_count": result.skipped_count,
                },
            )
        )
        return result

    def _emit_failure(self, location: str, exc: AggregationError) -> None:
        self.sink.emit(
            DiagnosticEvent(
                level=logging.ERROR,
                message=f"aggregation failed: {exc}",
                context={"location": location, "error_type": type(exc).__name__},
            )
        )

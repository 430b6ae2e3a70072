from collections.abc import Mapping
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Record:
    identifier: int
    name: str
    group: str
    amount: float


@dataclass(frozen=True)
class SkippedRow:
    row_number: int
    raw_row: tuple[str, ...]
    reason: str


@dataclass(frozen=True)
class AggregationResult:
    total_amount: float
    top_record: Record | None
    # Read-only view; built with types.MappingProxyType.
    group_averages: Mapping[str, float]
    valid_count: int
    skipped_count: int

    def to_dict(self) -> dict[str, object]:
        return {
            "total_amount": self.total_amount,
            "top_record": asdict(self.top_record) if self.top_record is not None else None,
            "group_averages": dict(self.group_averages),
            "valid_count": self.valid_count,
            "skipped_count": self.skipped_count,
        }

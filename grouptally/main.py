import argparse
import json
import logging
from typing import NoReturn

from grouptally.aggregator import Aggregator
from grouptally.config import get_settings
from grouptally.diagnostics import LoggingSink
from grouptally.errors import AggregationError, ConfigurationError
from grouptally.schemas import AggregationResult


logger = logging.getLogger("grouptally")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Summarize grouped amounts from a CSV file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="aggregate one input file")
    run_parser.add_argument("--input", required=False, help="CSV file to read (defaults to INPUT_PATH)")
    run_parser.add_argument("--delimiter", required=False, help="field delimiter (defaults to CSV_DELIMITER)")
    run_parser.add_argument("--json", action="store_true", help="print the result as JSON")

    return parser.parse_args()


def format_result(result: AggregationResult) -> str:
    top = result.top_record
    lines = [
        "status=succeeded total={total:.2f} top={top} top_amount={top_amount} valid={valid} skipped={skipped}".format(
            total=result.total_amount,
            top=top.name if top else None,
            top_amount=f"{top.amount:.2f}" if top else None,
            valid=result.valid_count,
            skipped=result.skipped_count,
        )
    ]
    for group, average in result.group_averages.items():
        lines.append(f"group={group} average={average:.2f}")
    return "\n".join(lines)


def _fail(exc: Exception) -> NoReturn:
    print(f"status=failed error_type={type(exc).__name__} error={exc}")
    raise SystemExit(1)


def main() -> None:
    args = parse_args()
    try:
        settings = get_settings()
    except ConfigurationError as exc:
        _fail(exc)

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    input_path = args.input or settings.input_path
    delimiter = args.delimiter if args.delimiter is not None else settings.delimiter
    try:
        aggregator = Aggregator(LoggingSink(logger), delimiter=delimiter, encoding=settings.encoding)
        result = aggregator.aggregate_file(input_path)
    except (ConfigurationError, AggregationError) as exc:
        _fail(exc)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, sort_keys=True))
        return
    print(format_result(result))


if __name__ == "__main__":
    main()

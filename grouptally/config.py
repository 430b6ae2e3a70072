from dataclasses import dataclass
import os

from dotenv import load_dotenv

from grouptally.source import check_delimiter, check_encoding


load_dotenv()


@dataclass(frozen=True)
class Settings:
    app_name: str
    log_level: str
    input_path: str
    delimiter: str
    encoding: str


def get_settings() -> Settings:
    return Settings(
        app_name=os.getenv("APP_NAME", "grouptally"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        input_path=os.getenv("INPUT_PATH", "./data/input/records.csv"),
        delimiter=check_delimiter(os.getenv("CSV_DELIMITER", ",")),
        encoding=check_encoding(os.getenv("INPUT_ENCODING", "utf-8")),
    )

class AggregationError(Exception):
    """Fatal failure: the caller gets no result."""


class SourceNotFoundError(AggregationError):
    pass


class EmptySourceError(AggregationError):
    pass


class HeaderOnlyError(AggregationError):
    pass


class ProcessingError(AggregationError):
    def __init__(self, message: str, cause: BaseException) -> None:
        super().__init__(f"{message}: {cause}")
        self.cause = cause


class RowValidationError(ValueError):
    """A single row failed validation. Never escapes the row parser."""


class ConfigurationError(ValueError):
    """Reader settings that can never work, such as an unknown encoding."""

"""Custom exceptions for statement comparison."""


class StatementCompareError(Exception):
    """Base exception for statement comparison errors."""

    pass


class FileParseError(StatementCompareError):
    """Uploaded file could not be decoded as a supported spreadsheet."""

    pass


class TransportError(StatementCompareError):
    """The inference service call failed."""

    pass


class FormatError(StatementCompareError):
    """Inference reply is not valid JSON, or not the expected shape."""

    pass


class MissingInputError(StatementCompareError):
    """A step was triggered before the data it needs exists."""

    pass


class SessionNotFoundError(StatementCompareError):
    """No comparison session with the given id."""

    pass


class StepInProgressError(StatementCompareError):
    """Another inference call is already running for the session."""

    pass

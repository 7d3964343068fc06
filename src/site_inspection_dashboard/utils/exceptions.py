"""Custom exception classes for error handling."""


class ProcessingError(Exception):
    """Base exception for all processing errors."""

    pass


class InvalidInputError(ProcessingError):
    """Inspection records could not be read or have the wrong shape."""

    pass


class UnknownSelectorError(ProcessingError):
    """Drill-down selector is not part of the known vocabulary."""

    pass


class ExportError(ProcessingError):
    """Error writing statistics or drill-down exports."""

    pass

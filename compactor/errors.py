class CompactorError(Exception):
    """Base class for compactor errors."""


class ParameterValidationError(CompactorError):
    pass


class FileReadError(CompactorError):
    pass


class SummarizationError(CompactorError):
    def __init__(self, message: str, status_code: int | None = None, detail: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class FileWriteError(CompactorError):
    pass

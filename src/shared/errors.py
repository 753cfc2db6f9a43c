"""Custom exception classes for the seeder pipeline."""
from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str, exit_code: int = 1) -> None:
        self.detail = detail
        self.exit_code = exit_code
        super().__init__(detail)


class ConfigurationError(AppError):
    """Invalid settings or config file."""

    def __init__(self, detail: str = "Configuration error") -> None:
        super().__init__(detail=detail, exit_code=2)


class LiteralSyntaxError(AppError):
    """A literal span could not be parsed."""

    def __init__(self, detail: str = "Invalid literal", position: int = -1) -> None:
        self.position = position
        if position >= 0:
            detail = f"{detail} at offset {position}"
        super().__init__(detail=detail)


class EntryPointReadError(AppError):
    """An entry-point file could not be read."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        message = f"Could not read entry point {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(detail=message)


class DatasetWriteError(AppError):
    """The dataset could not be serialised or written."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        message = f"Could not write dataset {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(detail=message)


class DatasetNotFoundError(AppError):
    """No dataset has been extracted yet."""

    def __init__(self, detail: str = "No dataset found - run extract first") -> None:
        super().__init__(detail=detail)


class TableNotFoundError(AppError):
    """Table is not present in the dataset."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(detail=f"Table '{name}' not found in dataset")


class LLMError(AppError):
    """The LLM completion request failed."""

    def __init__(self, detail: str = "LLM request failed") -> None:
        super().__init__(detail=detail)

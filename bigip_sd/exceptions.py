"""
Exception classes for bigip-sd.

Only run-aborting conditions are exceptions. Per-line and per-host
failures are recorded as `Diagnostic` values and never raised.
"""

from typing import Optional


class BigIPSDError(Exception):
    """Base exception for all bigip-sd errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InputFileError(BigIPSDError):
    """Raised when an input list (URLs or subnets) cannot be opened or read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            code="input_unreadable",
            message=f"Failed to read input file '{path}': {reason}",
            details={"path": path, "reason": reason},
        )
        self.path = path


class ConfigError(BigIPSDError):
    """Raised when the YAML configuration is missing or malformed."""

    pass


class OutputFileError(BigIPSDError):
    """Raised when the exported targets cannot be written."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            code="output_unwritable",
            message=f"Failed to write targets to '{path}': {reason}",
            details={"path": path, "reason": reason},
        )
        self.path = path

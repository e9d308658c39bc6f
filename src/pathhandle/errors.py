"""Error family raised by path handles and its structured payload model."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class ErrorPayload(BaseModel):
    """Payload describing a failure in a form callers can serialize as-is."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    code: str
    message: str
    details: Optional[Dict[str, Any]] = None
    hint: Optional[str] = None


def build_error_payload(
    *,
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    hint: Optional[str] = None,
) -> Dict[str, Any]:
    return ErrorPayload(
        code=code,
        message=message,
        details=details,
        hint=hint,
    ).model_dump(exclude_none=True)


class PathHandleError(Exception):
    """Base class for every error raised by :class:`~pathhandle.PathHandle`."""

    code = "PATH_HANDLE_ERROR"

    def __init__(
        self,
        message: str = "An unknown error occurred",
        *,
        path: str | None = None,
        operation: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.operation = operation
        self.hint = hint

    def __str__(self) -> str:
        return self.message

    def to_payload(self) -> Dict[str, Any]:
        details: Dict[str, Any] = {}
        if self.path is not None:
            details["path"] = self.path
        if self.operation is not None:
            details["operation"] = self.operation
        return build_error_payload(
            code=self.code,
            message=self.message,
            details=details or None,
            hint=self.hint,
        )


class InvalidArgumentError(PathHandleError, ValueError):
    """Raised when the constructor fragments are malformed."""

    code = "INVALID_ARGUMENT"


class PathNotFoundError(PathHandleError, FileNotFoundError):
    """Raised when an operation needs an existing path."""

    code = "PATH_NOT_FOUND"


class WrongTypeError(PathHandleError, OSError):
    """Raised when the path exists but is the wrong kind of entry."""

    code = "WRONG_TYPE"


class NotAFileError(WrongTypeError, IsADirectoryError):
    code = "NOT_A_FILE"


class NotADirectoryPathError(WrongTypeError, NotADirectoryError):
    code = "NOT_A_DIRECTORY"


class AlreadyExistsError(PathHandleError, FileExistsError):
    """Raised when an operation needs the target to be absent."""

    code = "ALREADY_EXISTS"


class ParseError(PathHandleError, ValueError):
    """Raised when structured file content cannot be decoded."""

    code = "PARSE_ERROR"

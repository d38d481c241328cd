"""Error hierarchy for the im.ge uploader plugin.

Every error class inherits from :class:`ImgeError`.  Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

None of these errors reach the host: the upload stage converts them into a
``False`` result plus a notification (see :mod:`imge_uploader.uploader`).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the plugin can raise."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    SIZE_LIMIT_ERROR = "SIZE_LIMIT_ERROR"
    REMOTE_UPLOAD_ERROR = "REMOTE_UPLOAD_ERROR"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class ImgeError(Exception):
    """Base exception for all uploader errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A user-facing description of what went wrong.  This is the text
        shown in the host notification.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Concrete errors
# ---------------------------------------------------------------------------

class ConfigurationError(ImgeError):
    """Stored settings are missing or invalid.

    Raised before any network call is made.

    Context keys: ``field``, ``value``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.CONFIGURATION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class SizeLimitError(ImgeError):
    """An image exceeds the configured ``image_max_size``.

    Context keys: ``file_name``, ``size_mb``, ``max_size_mb``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.SIZE_LIMIT_ERROR,
            message=message,
            context=context,
            cause=cause,
        )

    @property
    def file_name(self) -> str | None:
        return self.context.get("file_name")

    @property
    def size_mb(self) -> float | None:
        return self.context.get("size_mb")

    @property
    def max_size_mb(self) -> float | None:
        return self.context.get("max_size_mb")


class RemoteUploadError(ImgeError):
    """im.ge answered, but not with a successful upload.

    Context keys: ``file_name``, ``status_code``, ``status_txt``,
    ``http_status``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.REMOTE_UPLOAD_ERROR,
            message=message,
            context=context,
            cause=cause,
        )

    @property
    def status_txt(self) -> str | None:
        return self.context.get("status_txt")


class TransportError(ImgeError):
    """The request never produced a response (timeout, DNS, connection reset).

    Handled exactly like :class:`RemoteUploadError` at the batch boundary.

    Context keys: ``url``, ``file_name``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.TRANSPORT_ERROR,
            message=message,
            context=context,
            cause=cause,
        )

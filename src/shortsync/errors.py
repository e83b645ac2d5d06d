"""Full error hierarchy for shortsync.

Every public error class inherits from ShortsyncError. Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

Two families matter to callers:

* :class:`ConfigError` and its subclasses -- the link file is invalid.
  Always fatal; raised before any remote call is made.
* ``Shortio*Error`` -- raised by the HTTP transport.  Fatal when fetching
  remote state, collected per entry when applying a diff.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error shortsync can raise."""

    CONFIG_ERROR = "CONFIG_ERROR"
    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    CONFIG_EMPTY = "CONFIG_EMPTY"
    CONFIG_PARSE_ERROR = "CONFIG_PARSE_ERROR"
    DOCUMENT_NOT_OBJECT = "DOCUMENT_NOT_OBJECT"
    MISSING_DOMAIN = "MISSING_DOMAIN"
    MISSING_LINKS_MAP = "MISSING_LINKS_MAP"
    EMPTY_SLUG = "EMPTY_SLUG"
    DUPLICATE_LINK = "DUPLICATE_LINK"
    LINK_NOT_OBJECT = "LINK_NOT_OBJECT"
    MISSING_URL = "MISSING_URL"
    INVALID_URL = "INVALID_URL"
    INVALID_TITLE_TYPE = "INVALID_TITLE_TYPE"
    INVALID_TAGS_TYPE = "INVALID_TAGS_TYPE"
    INVALID_TAG_TYPE = "INVALID_TAG_TYPE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    RETRY_EXHAUSTED = "RETRY_EXHAUSTED"
    NETWORK_ERROR = "NETWORK_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class ShortsyncError(Exception):
    """Base exception for all shortsync errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys and expected types are documented per subclass.
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
# Link file errors
# ---------------------------------------------------------------------------

class ConfigError(ShortsyncError):
    """Base class for every link-file validation or parse failure.

    Context keys vary by subclass but always include ``document_index``
    (1-based) once document processing has started.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
        code: str = ErrorCode.CONFIG_ERROR,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class ConfigNotFoundError(ConfigError):
    """The link file does not exist.

    Context keys: ``path``.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, context, code=ErrorCode.CONFIG_NOT_FOUND)


class ConfigEmptyError(ConfigError):
    """The link file contains no YAML documents.

    Context keys: ``path``.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, context, code=ErrorCode.CONFIG_EMPTY)


class ConfigParseError(ConfigError):
    """A YAML document is not well formed.

    Context keys: ``document_index``, ``parser_message``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, context, cause, code=ErrorCode.CONFIG_PARSE_ERROR)


class DocumentNotObjectError(ConfigError):
    """A YAML document is not a mapping.

    Context keys: ``document_index``.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, context, code=ErrorCode.DOCUMENT_NOT_OBJECT)


class MissingDomainError(ConfigError):
    """``domain`` is absent, not a string, or blank.

    Context keys: ``document_index``.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, context, code=ErrorCode.MISSING_DOMAIN)


class MissingLinksMapError(ConfigError):
    """``links`` is absent, not a mapping, or uses the legacy list format.

    Context keys: ``document_index``.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, context, code=ErrorCode.MISSING_LINKS_MAP)


class EmptySlugError(ConfigError):
    """A key in ``links`` is empty or whitespace.

    Context keys: ``document_index``.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, context, code=ErrorCode.EMPTY_SLUG)


class DuplicateLinkError(ConfigError):
    """``domain/slug`` appears more than once in the link file.

    Context keys: ``document_index``, ``slug``, ``key``.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, context, code=ErrorCode.DUPLICATE_LINK)


class LinkNotObjectError(ConfigError):
    """A link value is not a mapping.

    Context keys: ``document_index``, ``slug``.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, context, code=ErrorCode.LINK_NOT_OBJECT)


class MissingUrlError(ConfigError):
    """``url`` is absent, not a string, or blank.

    Context keys: ``document_index``, ``slug``.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, context, code=ErrorCode.MISSING_URL)


class InvalidUrlError(ConfigError):
    """``url`` is not an absolute URL (scheme and host required).

    Context keys: ``document_index``, ``slug``, ``url``.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, context, code=ErrorCode.INVALID_URL)


class InvalidTitleTypeError(ConfigError):
    """``title`` is present but not a string.

    Context keys: ``document_index``, ``slug``.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, context, code=ErrorCode.INVALID_TITLE_TYPE)


class InvalidTagsTypeError(ConfigError):
    """``tags`` is present but not a list.

    Context keys: ``document_index``, ``slug``.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, context, code=ErrorCode.INVALID_TAGS_TYPE)


class InvalidTagTypeError(ConfigError):
    """An element of ``tags`` is not a string.

    Context keys: ``document_index``, ``slug``, ``tag``.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, context, code=ErrorCode.INVALID_TAG_TYPE)


# ---------------------------------------------------------------------------
# API / transport errors
# ---------------------------------------------------------------------------

class ShortioValidationError(ShortsyncError):
    """Short.io returned 400 (or another non-retryable 4xx).

    Context keys: ``status_code``, ``body``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class ShortioAuthError(ShortsyncError):
    """Short.io returned 401 -- the API key is invalid.

    Context keys: ``status_code``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.AUTH_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class ShortioPermissionError(ShortsyncError):
    """Short.io returned 403 -- the key lacks access to the resource.

    Context keys: ``status_code``, ``operation``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.PERMISSION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class ShortioNotFoundError(ShortsyncError):
    """Short.io returned 404, or a domain hostname is not registered.

    Context keys: ``status_code``, ``path`` or ``domain``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=message,
            context=context,
            cause=cause,
        )


class ShortioRateLimitError(ShortsyncError):
    """Short.io returned 429 -- rate limit exceeded.

    Context keys: ``retry_after_seconds``, ``attempt``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.RATE_LIMITED,
            message=message,
            context=context,
            cause=cause,
        )


class ShortioRetryExhaustedError(ShortsyncError):
    """All retry attempts have been exhausted for a retryable request.

    Context keys: ``attempts``, ``last_status_code``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.RETRY_EXHAUSTED,
            message=message,
            context=context,
            cause=cause,
        )


class ShortioNetworkError(ShortsyncError):
    """A transport-level failure occurred (timeout, DNS, connection reset).

    Context keys: ``url``, ``attempt``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.NETWORK_ERROR,
            message=message,
            context=context,
            cause=cause,
        )

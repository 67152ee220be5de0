"""Error taxonomy, classification and user-facing messages.

Every failure a command can hit is mapped onto a small set of categories so
the dispatch boundaries can log it once and answer the user with a single
safe reply. Transient failures in the media-source adapters can be retried
with ``retry_with_backoff``; the command layer itself never retries.

Example:
    from rapibot.core.errors import classify_error, user_message_for

    try:
        await command.execute(message, args)
    except Exception as ex:
        category = classify_error(ex)
        await message.reply(user_message_for(ex))
"""

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum, auto
from typing import TypeVar

import aiohttp

from rapibot.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Discord JSON error code for "Request entity too large"
DISCORD_FILE_TOO_LARGE_CODE = 40005


class ErrorCategory(Enum):
    """Classification of error types for handling decisions."""

    # Transient errors - safe to retry
    TIMEOUT = auto()  # Request/operation timeout
    NETWORK = auto()  # Network connectivity issues
    SERVICE_UNAVAILABLE = auto()  # Temporary upstream outage (5xx)

    # Permanent errors - should not retry
    NOT_FOUND = auto()  # Unknown command, game or empty media pool
    RATE_LIMITED = auto()  # Caller is inside a cooldown or over quota
    TOO_LARGE = auto()  # Media exceeds the attachment ceiling
    PERSISTENCE = auto()  # Usage store read/write failure
    INVALID_INPUT = auto()  # Bad arguments
    UNKNOWN = auto()  # Unclassified error


RETRYABLE_CATEGORIES = {
    ErrorCategory.TIMEOUT,
    ErrorCategory.NETWORK,
    ErrorCategory.SERVICE_UNAVAILABLE,
}


class BotError(Exception):
    """Base class for errors raised by the bot itself.

    Attributes:
        user_message: Text safe to show in the channel, or None to fall back
            to the category default.
    """

    category = ErrorCategory.UNKNOWN

    def __init__(self, message: str, user_message: str | None = None) -> None:
        super().__init__(message)
        self.user_message = user_message


class CommandError(BotError):
    """A handler failed in a way the user should hear about."""


class NotFoundError(CommandError):
    """Unknown command, game or media pool."""

    category = ErrorCategory.NOT_FOUND


class EmptyMediaPool(NotFoundError):
    """No media under a path matched the extension and size filters.

    Attributes:
        path: The media path that was listed.
        extensions: The extension filter that was applied.
    """

    def __init__(self, path: str, extensions: tuple[str, ...] = ()) -> None:
        super().__init__(
            f"No valid media files found under {path!r} with extensions: "
            f"{', '.join(extensions) or 'any'}"
        )
        self.path = path
        self.extensions = extensions


class RateLimitedError(CommandError):
    """The caller is still inside a cooldown window.

    Attributes:
        remaining_ms: Milliseconds until the command may be used again.
    """

    category = ErrorCategory.RATE_LIMITED

    def __init__(self, remaining_ms: int, scope: str | None = None) -> None:
        super().__init__(f"Rate limited for {remaining_ms}ms (scope={scope})")
        self.remaining_ms = remaining_ms
        self.scope = scope


class UpstreamTooLarge(CommandError):
    """Media exceeds the host attachment size limit.

    Attributes:
        size_bytes: Size of the media if known.
        limit_bytes: The limit that was exceeded.
    """

    category = ErrorCategory.TOO_LARGE

    def __init__(
        self,
        message: str = "Media exceeds the attachment size limit",
        size_bytes: int | None = None,
        limit_bytes: int | None = None,
    ) -> None:
        super().__init__(message)
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes


class PersistenceError(BotError):
    """Usage store read or write failure. Logged, never fatal.

    Attributes:
        path: The file that could not be read or written.
        original_error: The underlying exception.
    """

    category = ErrorCategory.PERSISTENCE

    def __init__(
        self,
        message: str,
        path: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.original_error = original_error


class UnknownError(BotError):
    """Anything else, wrapped with context for logging."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.original_error = original_error


class TransientError(Exception):
    """Error that is temporary and can be retried.

    Attributes:
        category: The specific type of transient error.
        original_error: The underlying exception that was classified.
    """

    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.original_error = original_error

    @classmethod
    def from_exception(
        cls, ex: Exception, category: ErrorCategory | None = None
    ) -> "TransientError":
        """Create a TransientError from an existing exception."""
        if category is None:
            category = classify_error(ex)
        return cls(message=str(ex), category=category, original_error=ex)


USER_MESSAGES: dict[ErrorCategory, str] = {
    ErrorCategory.TOO_LARGE: (
        "Commander, the selected media file is too large for this server's upload limit. "
        "You may need to boost the server to allow larger file uploads, "
        "or try the command again for a different file."
    ),
    ErrorCategory.TIMEOUT: "Commander, the request timed out. Please try again in a moment.",
    ErrorCategory.NETWORK: "Commander, the request timed out. Please try again in a moment.",
    ErrorCategory.SERVICE_UNAVAILABLE: (
        "Commander, the media archive is unreachable right now. Please try again later."
    ),
    ErrorCategory.NOT_FOUND: "Commander, there's no media available for that right now.",
    ErrorCategory.RATE_LIMITED: "Commander, you're doing that too often. Please wait a bit.",
    ErrorCategory.INVALID_INPUT: "Commander, I couldn't understand that request.",
}

GENERIC_APOLOGY = "Sorry Commander, there was an error while executing this command!"


def _is_discord_too_large(error: Exception) -> bool:
    """Duck-typed check for discord.HTTPException 40005 / HTTP 413."""
    return (
        getattr(error, "code", None) == DISCORD_FILE_TOO_LARGE_CODE
        or getattr(error, "status", None) == 413
    )


def classify_error(error: Exception) -> ErrorCategory:
    """Classify an exception into an error category.

    Args:
        error: The exception to classify.

    Returns:
        The ErrorCategory that best matches the error.
    """
    if isinstance(error, (BotError, TransientError)):
        return error.category

    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return ErrorCategory.TIMEOUT

    if _is_discord_too_large(error):
        return ErrorCategory.TOO_LARGE

    if isinstance(error, aiohttp.ClientResponseError):
        if error.status >= 500:
            return ErrorCategory.SERVICE_UNAVAILABLE
        if error.status == 404:
            return ErrorCategory.NOT_FOUND
        return ErrorCategory.INVALID_INPUT

    if isinstance(error, (aiohttp.ClientError, ConnectionError)):
        return ErrorCategory.NETWORK

    if isinstance(error, ValueError):
        return ErrorCategory.INVALID_INPUT

    error_str = str(error).lower()
    if "503" in error_str or "service unavailable" in error_str:
        return ErrorCategory.SERVICE_UNAVAILABLE
    if "502" in error_str or "bad gateway" in error_str:
        return ErrorCategory.SERVICE_UNAVAILABLE

    return ErrorCategory.UNKNOWN


def is_retryable(category: ErrorCategory) -> bool:
    """Check if an error category is safe to retry."""
    return category in RETRYABLE_CATEGORIES


def user_message_for(error: Exception) -> str:
    """Return the single user-safe reply for an error.

    An explicit ``user_message`` on a BotError wins; otherwise the category
    default is used, and anything unclassified gets the generic apology.
    """
    if isinstance(error, BotError) and error.user_message:
        return error.user_message
    return USER_MESSAGES.get(classify_error(error), GENERIC_APOLOGY)


async def retry_with_backoff(
    func: Callable[..., Awaitable[T]],
    *args: object,
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    exponential_base: float = 2.0,
    **kwargs: object,
) -> T:
    """Retry a function with exponential backoff for transient errors.

    Non-retryable errors are re-raised unchanged so callers keep seeing the
    original exception type.

    Args:
        func: Async function to call.
        *args: Positional arguments to pass to func.
        max_retries: Maximum number of retry attempts.
        base_delay: Initial delay between retries (seconds).
        max_delay: Maximum delay between retries (seconds).
        exponential_base: Base for exponential backoff calculation.
        **kwargs: Keyword arguments to pass to func.

    Returns:
        The result of the function call.

    Raises:
        TransientError: If all retries are exhausted.
    """
    for attempt in range(max_retries + 1):
        try:
            return await func(*args, **kwargs)
        except Exception as ex:
            category = classify_error(ex)

            if not is_retryable(category):
                raise

            if attempt >= max_retries:
                logger.error(
                    "max_retries_exceeded",
                    category=category.name,
                    attempts=attempt + 1,
                    error=str(ex),
                )
                raise TransientError.from_exception(ex, category) from ex

            delay = min(base_delay * (exponential_base**attempt), max_delay)

            logger.warning(
                "retrying_after_error",
                category=category.name,
                attempt=attempt + 1,
                max_retries=max_retries,
                delay_seconds=delay,
                error=str(ex),
            )

            await asyncio.sleep(delay)

    raise RuntimeError("Unexpected state in retry_with_backoff")

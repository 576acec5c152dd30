import asyncio
import random
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, FrozenSet, List, Optional
from collections import Counter, defaultdict
from urllib.parse import urlparse
import aiohttp

from ..errors import FetchError

logger = logging.getLogger(__name__)


class ErrorType(Enum):
    """Why a page fetch failed"""
    NETWORK_TIMEOUT = "network_timeout"
    CONNECTION_ERROR = "connection_error"
    HTTP_CLIENT_ERROR = "http_client_error"
    HTTP_SERVER_ERROR = "http_server_error"
    RATE_LIMITED = "rate_limited"
    NAVIGATION_ERROR = "navigation_error"
    UNKNOWN_ERROR = "unknown_error"


# 4xx responses other than 429 will not change on retry
PERMANENT_ERRORS = frozenset({ErrorType.HTTP_CLIENT_ERROR})


@dataclass
class RetryConfig:
    """Backoff schedule for failed fetches"""
    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: bool = True
    retryable_errors: FrozenSet[ErrorType] = field(
        default_factory=lambda: frozenset(ErrorType) - PERMANENT_ERRORS
    )

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


@dataclass
class ErrorInfo:
    """One failed attempt"""
    url: str
    error_type: ErrorType
    status_code: Optional[int]
    message: str
    timestamp: float
    attempt: int
    response_time: Optional[float] = None


def _status_error_type(status_code: int) -> ErrorType:
    if status_code == 429:
        return ErrorType.RATE_LIMITED
    if status_code >= 500:
        return ErrorType.HTTP_SERVER_ERROR
    if status_code >= 400:
        return ErrorType.HTTP_CLIENT_ERROR
    return ErrorType.UNKNOWN_ERROR


def _describe(error: Exception) -> str:
    return str(error) or type(error).__name__


class ErrorHandler:
    """
    Retry loop shared by every fetch

    Each failed attempt is recorded. A URL stays in failed_urls until one of
    its attempts succeeds, so after a crawl it lists the pages that were given up on.
    """

    def __init__(self, retry_config: RetryConfig = None):
        self.retry_config = retry_config or RetryConfig()
        self.error_history: List[ErrorInfo] = []
        self.failed_urls: Dict[str, List[ErrorInfo]] = defaultdict(list)

    def classify_error(self, error: Exception, status_code: Optional[int] = None) -> ErrorType:
        # FetchError wraps the transport exception that caused it
        cause = error.__cause__ if isinstance(error, FetchError) and error.__cause__ else error

        if isinstance(cause, (asyncio.TimeoutError, TimeoutError)):
            return ErrorType.NETWORK_TIMEOUT
        if isinstance(cause, aiohttp.ClientConnectionError):
            return ErrorType.CONNECTION_ERROR
        if status_code:
            return _status_error_type(status_code)

        text = str(error)
        if "timeout" in text.lower():
            return ErrorType.NETWORK_TIMEOUT
        if "net::" in text or "navigat" in text.lower():
            return ErrorType.NAVIGATION_ERROR
        return ErrorType.UNKNOWN_ERROR

    def is_retryable(self, error_type: ErrorType, attempt: int) -> bool:
        return attempt < self.retry_config.max_attempts and error_type in self.retry_config.retryable_errors

    def calculate_delay(self, attempt: int, error_type: ErrorType) -> float:
        """Exponential backoff, doubled when rate limited, capped, then up to 10% jitter"""
        config = self.retry_config
        delay = config.base_delay * config.exponential_base ** (attempt - 1)
        if error_type is ErrorType.RATE_LIMITED:
            delay *= 2
        delay = min(delay, config.max_delay)
        if config.jitter:
            delay *= 1 + 0.1 * random.random()
        return delay

    def _record(self, url: str, error: Exception, attempt: int, started: float) -> ErrorInfo:
        status_code = getattr(error, 'status', None)
        info = ErrorInfo(
            url=url,
            error_type=self.classify_error(error, status_code),
            status_code=status_code,
            message=_describe(error),
            timestamp=time.time(),
            attempt=attempt,
            response_time=time.time() - started
        )
        self.error_history.append(info)
        self.failed_urls[url].append(info)
        return info

    async def execute_with_retry(self, func: Callable[..., Awaitable[Any]], url: str, *args, **kwargs) -> Any:
        """
        Await func(*args, **kwargs) until it succeeds or retries are exhausted

        Raises:
            FetchError: after the last failed attempt, with retry_count set
        """
        attempt = 0
        while True:
            attempt += 1
            started = time.time()
            try:
                result = await func(*args, **kwargs)
            except asyncio.CancelledError:
                raise
            except Exception as error:
                info = self._record(url, error, attempt, started)
                if not self.is_retryable(info.error_type, attempt):
                    logger.error(f"Giving up on {url} after {attempt - 1} retries: "
                                 f"{info.error_type.value} - {info.message}")
                    fetch_error = self._give_up(error, info)
                    if fetch_error is error:
                        raise
                    raise fetch_error from error

                delay = self.calculate_delay(attempt, info.error_type)
                logger.warning(f"Attempt {attempt}/{self.retry_config.max_attempts} for {url} failed "
                               f"({info.error_type.value}: {info.message}), retrying in {delay:.1f}s")
                await asyncio.sleep(delay)
            else:
                self.failed_urls.pop(url, None)
                return result

    @staticmethod
    def _give_up(error: Exception, info: ErrorInfo) -> FetchError:
        if isinstance(error, FetchError):
            fetch_error = error
        else:
            fetch_error = FetchError(info.url, info.message, info.status_code)
        fetch_error.retry_count = info.attempt - 1
        return fetch_error

    def get_error_summary(self) -> Dict[str, Any]:
        if not self.error_history:
            return {"total_errors": 0}

        return {
            "total_errors": len(self.error_history),
            "failed_urls": len(self.failed_urls),
            "error_types": dict(Counter(e.error_type.value for e in self.error_history)),
            "domain_errors": dict(Counter(urlparse(e.url).netloc or "unknown" for e in self.error_history))
        }

    def get_failed_urls(self) -> List[str]:
        """URLs whose last attempt failed"""
        return list(self.failed_urls)

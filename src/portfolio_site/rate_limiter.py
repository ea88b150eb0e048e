"""In-memory sliding-window rate limiter for the outbound proxy endpoints.

Counts requests per client key inside a fixed window that resets fully once it
expires. State lives in process memory only, so quotas are per instance and are
lost on restart.
"""

import math
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from pydantic import BaseModel, Field

from .logger import logger

DEFAULT_WINDOW_MS = 60_000
DEFAULT_CLEANUP_INTERVAL_SECONDS = 60.0

# Bucket shared by every client whose address cannot be determined
UNKNOWN_CLIENT = "unknown"

# Checked in order; the first header present wins
CLIENT_IP_HEADERS = ("x-forwarded-for", "x-real-ip", "cf-connecting-ip")


class RateLimitOptions(BaseModel):
    limit: int = Field(..., gt=0)
    window_ms: int = Field(default=DEFAULT_WINDOW_MS, gt=0)
    key_prefix: str = ""


class RateLimitInfo(BaseModel):
    limit: int
    remaining: int
    reset: int  # epoch seconds
    retry_after: int | None = None  # seconds, only set when denied


class RateLimitResult(BaseModel):
    allowed: bool
    info: RateLimitInfo


@dataclass
class RateLimitEntry:
    count: int
    reset_time: float  # epoch milliseconds


class RateLimiter:
    """Per-key request counter with a fixed window and a background sweeper."""

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        cleanup_interval: float | None = DEFAULT_CLEANUP_INTERVAL_SECONDS,
    ):
        """Initialize the limiter.

        Args:
            clock: Returns the current time in epoch seconds.
            cleanup_interval: Seconds between sweeps of expired entries.
                None disables the background sweeper; sweep() can still be
                called directly.
        """
        self._clock = clock
        self._store: dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._sweeper: threading.Thread | None = None

        if cleanup_interval is not None:
            self._sweeper = threading.Thread(
                target=self._sweep_loop,
                args=(cleanup_interval,),
                name="rate-limiter-sweeper",
                daemon=True,
            )
            self._sweeper.start()

    def _now_ms(self) -> float:
        return self._clock() * 1000

    def check(self, key: str, options: RateLimitOptions) -> RateLimitResult:
        """Record a request for key and decide whether it is allowed.

        Args:
            key: Client identifier, usually an IP address.
            options: Limit, window length and optional key namespace.

        Returns:
            RateLimitResult; denied results carry retry_after in seconds.
        """
        full_key = f"{options.key_prefix}:{key}" if options.key_prefix else key
        now = self._now_ms()

        with self._lock:
            entry = self._store.get(full_key)

            if entry is None or entry.reset_time <= now:
                entry = RateLimitEntry(count=1, reset_time=now + options.window_ms)
                self._store[full_key] = entry
                return RateLimitResult(
                    allowed=True,
                    info=RateLimitInfo(
                        limit=options.limit,
                        remaining=options.limit - 1,
                        reset=math.ceil(entry.reset_time / 1000),
                    ),
                )

            if entry.count >= options.limit:
                retry_after = math.ceil((entry.reset_time - now) / 1000)
                logger.warn(
                    "request throttled",
                    key=full_key,
                    limit=options.limit,
                    retry_after=retry_after,
                )
                return RateLimitResult(
                    allowed=False,
                    info=RateLimitInfo(
                        limit=options.limit,
                        remaining=0,
                        reset=math.ceil(entry.reset_time / 1000),
                        retry_after=retry_after,
                    ),
                )

            entry.count += 1
            return RateLimitResult(
                allowed=True,
                info=RateLimitInfo(
                    limit=options.limit,
                    remaining=options.limit - entry.count,
                    reset=math.ceil(entry.reset_time / 1000),
                ),
            )

    def sweep(self) -> int:
        """Delete entries whose window has ended. Returns the number removed."""
        now = self._now_ms()
        with self._lock:
            expired = [k for k, entry in self._store.items() if entry.reset_time <= now]
            for k in expired:
                del self._store[k]
        if expired:
            logger.debug("rate limiter sweep", removed=len(expired), active=len(self._store))
        return len(expired)

    def _sweep_loop(self, interval: float) -> None:
        while not self._stop.wait(interval):
            self.sweep()

    def __len__(self) -> int:
        return len(self._store)

    def dispose(self) -> None:
        """Stop the sweeper and drop all state."""
        self._stop.set()
        if self._sweeper is not None and self._sweeper is not threading.current_thread():
            self._sweeper.join(timeout=1.0)
        self._sweeper = None
        with self._lock:
            self._store.clear()


def get_client_ip(headers: Mapping[str, str]) -> str:
    """Extract the client address from proxy headers.

    Prefers X-Forwarded-For (first entry), then X-Real-IP, then
    CF-Connecting-IP. Returns "unknown" when none is present, in which case
    all such clients share one quota.
    """
    lowered = {k.lower(): v for k, v in headers.items()}

    forwarded_for = lowered.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    for header in CLIENT_IP_HEADERS[1:]:
        value = lowered.get(header)
        if value:
            return value

    return UNKNOWN_CLIENT


def create_rate_limit_headers(info: RateLimitInfo) -> dict[str, str]:
    headers = {
        "X-RateLimit-Limit": str(info.limit),
        "X-RateLimit-Remaining": str(info.remaining),
        "X-RateLimit-Reset": str(info.reset),
    }
    if info.retry_after is not None:
        headers["Retry-After"] = str(info.retry_after)
    return headers

import asyncio
import hashlib
import time
from threading import RLock
from typing import Awaitable, Callable, Dict, Optional, Tuple


class MinIntervalRateLimiter:
    """Enforces a minimum spacing between consecutive requests.

    Callers queue on an asyncio lock, so concurrent pipeline runs sharing one
    credential are spaced exactly rather than racing on a shared timestamp.
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.min_interval = max(0.0, min_interval)
        self.clock = clock
        self.sleep = sleep
        self.last_request_at: Optional[float] = None
        self._lock: Optional[asyncio.Lock] = None

    def _get_lock(self) -> asyncio.Lock:
        # Created lazily so the limiter can be built outside a running loop
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    def remaining_wait(self) -> float:
        if self.last_request_at is None:
            return 0.0
        elapsed = self.clock() - self.last_request_at
        return max(0.0, self.min_interval - elapsed)

    async def __call__(self) -> float:
        """Wait for the slot; returns the seconds slept."""
        async with self._get_lock():
            wait = self.remaining_wait()
            if wait > 0:
                await self.sleep(wait)
            self.last_request_at = self.clock()
            return wait


_limiters: Dict[Tuple[str, str], MinIntervalRateLimiter] = {}
_registry_lock = RLock()


def get_rate_limiter(provider: str, api_key: Optional[str], min_interval: float) -> MinIntervalRateLimiter:
    """Return the process-wide limiter for a provider credential."""
    key_hash = hashlib.sha256((api_key or "").encode("utf-8")).hexdigest()[:16]
    registry_key = (provider, key_hash)
    with _registry_lock:
        limiter = _limiters.get(registry_key)
        if limiter is None:
            limiter = MinIntervalRateLimiter(min_interval)
            _limiters[registry_key] = limiter
        return limiter


def reset_rate_limiters() -> None:
    """Forget all limiters (tests, credential rotation)."""
    with _registry_lock:
        _limiters.clear()

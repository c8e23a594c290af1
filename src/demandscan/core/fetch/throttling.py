"""
Rate limiting for the crawl loop.

Sources are processed one at a time with a fixed pause after each, no
matter which host they point at.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable


@dataclass
class RateLimitConfig:
    """Configuration for rate limiting."""

    delay_ms: int = 3000


class RateLimiter:
    """Fixed-interval limiter.

    Usage:
        limiter = RateLimiter(RateLimitConfig(delay_ms=3000))
        for source in sources:
            await process(source)
            await limiter.wait()
    """

    def __init__(
        self,
        config: RateLimitConfig | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize rate limiter.

        Args:
            config: Delay configuration
            sleep: Coroutine used to pause (replaceable in tests)
        """
        self.config = config or RateLimitConfig()
        self._sleep = sleep
        self.waits = 0

    @property
    def delay_seconds(self) -> float:
        return self.config.delay_ms / 1000.0

    async def wait(self) -> None:
        """Pause for the configured interval."""
        self.waits += 1
        if self.config.delay_ms > 0:
            await self._sleep(self.delay_seconds)

    def stats(self) -> dict[str, float]:
        return {
            "waits": self.waits,
            "delay_seconds": self.delay_seconds,
            "total_wait_seconds": self.waits * self.delay_seconds,
        }

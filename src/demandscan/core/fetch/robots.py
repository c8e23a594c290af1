"""
robots.txt policy checks.

Only ``User-agent`` and ``Disallow`` lines are interpreted. ``Allow``,
wildcards and crawl-delay are ignored; the crawl loop has its own fixed
delay.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import urlsplit

from demandscan.core.backends.base import Backend, FetchError, RequestSpec

logger = logging.getLogger(__name__)


@dataclass
class RobotsDecision:
    """Outcome of a robots.txt check."""

    allowed: bool
    reason: str
    rule: str | None = None


def robots_url_for(url: str) -> str:
    """Return the robots.txt URL for the origin of url."""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}/robots.txt"


def evaluate_robots_txt(robots_txt: str, path: str, agent_token: str) -> RobotsDecision:
    """Decide whether path may be crawled under the given robots.txt body.

    A group applies when its User-agent is ``*`` or contains agent_token.
    A Disallow rule matches when it is ``/`` or a prefix of path; an empty
    Disallow value allows everything.
    """
    token = agent_token.lower()
    relevant = False

    for raw_line in robots_txt.splitlines():
        line = raw_line.strip().lower()

        if line.startswith("user-agent:"):
            agent = line[len("user-agent:"):].strip()
            relevant = agent == "*" or token in agent
            continue

        if relevant and line.startswith("disallow:"):
            rule = line[len("disallow:"):].strip()
            if not rule:
                continue
            if rule == "/" or path.lower().startswith(rule):
                return RobotsDecision(allowed=False, reason="disallowed", rule=rule)

    return RobotsDecision(allowed=True, reason="allowed")


class RobotsPolicy:
    """Fetches robots.txt and applies it to candidate URLs.

    Nothing is cached: every check re-fetches the file.
    """

    def __init__(
        self,
        backend: Backend,
        agent_token: str = "demandscan",
        fail_open: bool = True,
    ):
        """Initialize the policy.

        Args:
            backend: Backend used to download robots.txt
            agent_token: Substring identifying this crawler in User-agent lines
            fail_open: Allow crawling when robots.txt cannot be retrieved
        """
        self.backend = backend
        self.agent_token = agent_token.lower()
        self.fail_open = fail_open

    def _unreachable(self, reason: str) -> RobotsDecision:
        return RobotsDecision(allowed=self.fail_open, reason=reason)

    async def check(self, url: str) -> RobotsDecision:
        """Check whether url may be crawled."""
        robots_url = robots_url_for(url)

        try:
            result = await self.backend.fetch(RequestSpec(url=robots_url))
        except FetchError as e:
            logger.warning("robots.txt unavailable for %s: %s", url, e)
            return self._unreachable("robots.txt unreachable")

        if not result.ok:
            return self._unreachable(f"robots.txt returned HTTP {result.status_code}")

        path = urlsplit(url).path or "/"
        decision = evaluate_robots_txt(result.body, path, self.agent_token)

        if not decision.allowed:
            logger.info("robots.txt disallows %s (rule: %s)", url, decision.rule)

        return decision

    async def is_allowed(self, url: str) -> bool:
        return (await self.check(url)).allowed

"""Shared fixtures: in-memory database, mock HTTP transport, recording sender."""

from __future__ import annotations

from typing import Callable

import httpx
import pytest

from demandscan.core.backends.http_backend import HttpBackend
from demandscan.core.config.models import KeywordCategory, UserRoleName
from demandscan.core.errors import NotificationError
from demandscan.core.fetch.throttling import RateLimitConfig, RateLimiter
from demandscan.persistence.db import create_db_engine, make_session_factory
from demandscan.persistence.models import Base
from demandscan.persistence.repo import KeywordRepository, RoleRepository, SourceRepository

LONG_PAGE = (
    "<html><head><title>Market</title><script>var x = 'solar panel';</script></head>"
    "<body><h1>Buyers board</h1>"
    "<p>Hello all, I am looking for a solar panel and inverter for my shop in Ikeja. "
    "Please reach out with prices.</p></body></html>"
)


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.close()


class FakeSite:
    """Routes for httpx.MockTransport keyed by full URL."""

    def __init__(self):
        self.routes: dict[str, httpx.Response | Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, url: str, body: str = "", status: int = 200, content_type: str = "text/html"):
        self.routes[url] = httpx.Response(status, text=body, headers={"content-type": content_type})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, text="not found")
        if callable(route):
            return route(request)
        return route

    def fetched(self, url: str) -> int:
        return sum(1 for r in self.requests if str(r.url) == url)


@pytest.fixture
def site():
    return FakeSite()


@pytest.fixture
def backend(site):
    return HttpBackend(transport=httpx.MockTransport(site.handler))


class RecordingSleep:
    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleeper():
    return RecordingSleep()


@pytest.fixture
def rate_limiter(sleeper):
    return RateLimiter(RateLimitConfig(delay_ms=3000), sleep=sleeper)


class RecordingEmailSender:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[tuple[str, str, str]] = []

    async def send(self, to: str, subject: str, html: str) -> None:
        if self.fail:
            raise NotificationError("provider down", channel="email")
        self.sent.append((to, subject, html))


@pytest.fixture
def email_sender():
    return RecordingEmailSender()


def add_keywords(session, product=(), intent=(), location=()):
    repo = KeywordRepository(session)
    for kw in product:
        repo.create(kw, KeywordCategory.PRODUCT)
    for kw in intent:
        repo.create(kw, KeywordCategory.INTENT)
    for kw in location:
        repo.create(kw, KeywordCategory.LOCATION)
    session.commit()


def add_source(session, name: str, url: str, active: bool = True):
    source = SourceRepository(session).create(name=name, url=url, active=active)
    session.commit()
    return source


def add_admin(session, user_id: str):
    RoleRepository(session).assign(user_id, UserRoleName.ADMIN)
    session.commit()

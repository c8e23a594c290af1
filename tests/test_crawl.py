from demandscan.core.config.models import CrawlerConfig, FetchStatus
from demandscan.core.fetch.fetcher import BLOCKED_BY_ROBOTS
from demandscan.core.orchestrator.crawl import CONTENT_UNCHANGED, NO_ACTIVE_SOURCES, CrawlRunner
from demandscan.persistence.models import FetchedContent
from demandscan.persistence.repo import FetchedContentRepository

from conftest import LONG_PAGE, add_source


def _runner(session, backend, rate_limiter):
    return CrawlRunner(session, CrawlerConfig(), backend=backend, rate_limiter=rate_limiter)


async def test_no_active_sources(session, backend, rate_limiter):
    add_source(session, "Old forum", "https://old.example/", active=False)

    summary = await _runner(session, backend, rate_limiter).run()

    assert summary.to_response() == {"message": NO_ACTIVE_SOURCES, "fetched": 0}
    assert rate_limiter.waits == 0


async def test_inactive_sources_never_fetched(session, site, backend, rate_limiter):
    add_source(session, "Live", "https://live.example/buyers")
    add_source(session, "Paused", "https://paused.example/buyers", active=False)
    site.add("https://live.example/buyers", LONG_PAGE)

    summary = await _runner(session, backend, rate_limiter).run()

    assert summary.total == 1
    assert not any("paused.example" in str(r.url) for r in site.requests)


async def test_success_is_persisted(session, site, backend, rate_limiter):
    source = add_source(session, "Live", "https://live.example/buyers")
    site.add("https://live.example/buyers", LONG_PAGE)

    summary = await _runner(session, backend, rate_limiter).run()

    assert summary.successful == 1
    rows = session.query(FetchedContent).all()
    assert len(rows) == 1
    assert rows[0].source_id == source.id
    assert rows[0].status == "success"
    assert rows[0].content_hash
    assert "solar panel" in rows[0].raw_text


async def test_unchanged_content_skipped_without_new_row(session, site, backend, rate_limiter):
    source = add_source(session, "Live", "https://live.example/buyers")
    site.add("https://live.example/buyers", LONG_PAGE)
    runner = _runner(session, backend, rate_limiter)

    await runner.run()
    second = await runner.run()

    assert second.skipped == 1
    assert second.results[0].status == FetchStatus.SKIPPED
    assert second.results[0].error == CONTENT_UNCHANGED
    assert FetchedContentRepository(session).count(source.id) == 1


async def test_failures_recorded_with_reason(session, site, backend, rate_limiter):
    add_source(session, "Blocked", "https://blocked.example/private/board")
    add_source(session, "Broken", "https://broken.example/board")
    site.add("https://blocked.example/robots.txt", "User-agent: *\nDisallow: /private")
    site.add("https://broken.example/board", "oops", status=500)

    summary = await _runner(session, backend, rate_limiter).run()

    errors = {r.error for r in summary.results}
    assert errors == {BLOCKED_BY_ROBOTS, "HTTP 500: Internal Server Error"}
    assert summary.failed == 2

    rows = session.query(FetchedContent).all()
    assert [r.status for r in rows] == ["failed", "failed"]
    assert all(r.raw_text is None and r.content_hash is None for r in rows)


async def test_failed_fetches_are_never_skipped(session, site, backend, rate_limiter):
    source = add_source(session, "Broken", "https://broken.example/board")
    site.add("https://broken.example/board", "oops", status=503)
    runner = _runner(session, backend, rate_limiter)

    await runner.run()
    await runner.run()

    assert FetchedContentRepository(session).count(source.id) == 2


async def test_rate_limiter_waits_after_every_source(session, site, backend, rate_limiter, sleeper):
    for i in range(3):
        add_source(session, f"S{i}", f"https://s{i}.example/board")

    summary = await _runner(session, backend, rate_limiter).run()

    assert summary.total == 3
    assert sleeper.calls == [3.0, 3.0, 3.0]


async def test_response_payload_shape(session, site, backend, rate_limiter):
    source = add_source(session, "Live", "https://live.example/buyers")
    site.add("https://live.example/buyers", LONG_PAGE)

    response = (await _runner(session, backend, rate_limiter).run()).to_response()

    assert response["total"] == 1
    assert response["successful"] == 1
    assert response["results"] == [
        {"sourceId": source.id, "url": "https://live.example/buyers", "status": "success"}
    ]


async def test_emoji_entities_stored_and_later_sources_processed(session, site, backend, rate_limiter):
    add_source(session, "Blog", "https://blog.example/post")
    add_source(session, "Board", "https://board.example/buyers")
    site.add(
        "https://blog.example/post",
        "<p>Welcome to our new shop, make yourself at home &#55357;&#56832; come visit us in Lekki</p>",
    )
    site.add("https://board.example/buyers", LONG_PAGE)

    summary = await _runner(session, backend, rate_limiter).run()

    assert summary.total == 2
    assert summary.successful == 2
    assert site.fetched("https://board.example/buyers") == 1
    texts = [row.raw_text for row in session.query(FetchedContent).all()]
    assert any("home \U0001F600 come" in text for text in texts)


async def test_failed_insert_does_not_stop_the_pass(session, site, backend, rate_limiter, monkeypatch):
    add_source(session, "First", "https://first.example/buyers")
    add_source(session, "Second", "https://second.example/buyers")
    site.add("https://first.example/buyers", LONG_PAGE)
    site.add("https://second.example/buyers", LONG_PAGE + "<p>more</p>")

    runner = _runner(session, backend, rate_limiter)
    original_create = runner.contents.create
    calls = []

    def create_failing_once(*args, **kwargs):
        calls.append(args)
        if len(calls) == 1:
            raise UnicodeEncodeError("utf-8", "\ud83d", 0, 1, "surrogates not allowed")
        return original_create(*args, **kwargs)

    monkeypatch.setattr(runner.contents, "create", create_failing_once)

    summary = await runner.run()

    assert summary.total == 2
    assert summary.successful == 1
    assert summary.failed == 1
    [failed] = [r for r in summary.results if r.status == FetchStatus.FAILED]
    assert failed.error.startswith("Failed to store content")
    assert failed.fetched_content_id is None
    assert session.query(FetchedContent).count() == 1

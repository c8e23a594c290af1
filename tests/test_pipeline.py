"""Crawl followed by detection against the same store."""

from demandscan.core.config.models import CrawlerConfig
from demandscan.core.orchestrator.crawl import CrawlRunner
from demandscan.core.orchestrator.detection import DETECTION_COMPLETE, NO_NEW_LEADS, DetectionRunner
from demandscan.persistence.models import FetchedContent, Lead, Notification

from conftest import add_admin, add_keywords, add_source

BUYERS_PAGE = """
<html><body>
<nav>Home | Classifieds</nav>
<div class="post">Good morning. I am urgently looking for a 5kva inverter with
installation in Lekki. Budget is flexible, please send quotes.</div>
<script>trackVisit("inverter");</script>
</body></html>
"""

NEWS_PAGE = """
<html><body><article>Fuel prices rose again this week across the country according to
the latest figures released on Monday.</article></body></html>
"""


async def test_crawl_then_detect(session, site, backend, rate_limiter, email_sender):
    add_keywords(session, product=["inverter"], intent=["looking for"], location=["lekki"])
    add_admin(session, "admin-1")
    buyers = add_source(session, "Classifieds", "https://classifieds.example/wanted")
    add_source(session, "News", "https://news.example/today", active=False)
    site.add("https://classifieds.example/wanted", BUYERS_PAGE)
    site.add("https://news.example/today", NEWS_PAGE)

    crawl = await CrawlRunner(session, CrawlerConfig(), backend=backend, rate_limiter=rate_limiter).run()
    assert crawl.total == 1
    assert crawl.successful == 1
    assert session.query(FetchedContent).count() == 1
    assert session.query(FetchedContent).one().source_id == buyers.id
    assert not any("news.example" in str(r.url) for r in site.requests)

    detection = await DetectionRunner(session, email_sender=email_sender).run()

    assert detection.message == DETECTION_COMPLETE
    assert detection.leads_inserted == 1
    lead = session.query(Lead).one()
    assert lead.source_id == buyers.id
    assert lead.matched_keywords == ["inverter", "looking for"]
    assert lead.confidence_score == 30
    assert lead.notified
    assert session.query(Notification).filter_by(lead_id=lead.id).count() == 1

    # Unchanged pages are skipped and yield no new leads
    recrawl = await CrawlRunner(session, CrawlerConfig(), backend=backend, rate_limiter=rate_limiter).run()
    assert recrawl.total == 1
    assert recrawl.skipped == 1
    assert session.query(FetchedContent).count() == 1
    assert (await DetectionRunner(session).run()).message == NO_NEW_LEADS

import httpx

from demandscan.core.backends.http_backend import HttpBackend
from demandscan.core.fetch.robots import RobotsPolicy, evaluate_robots_txt, robots_url_for

ROBOTS = """\
User-agent: *
Disallow: /private
"""


def test_robots_url_for_origin():
    assert robots_url_for("https://example.com/a/b?q=1") == "https://example.com/robots.txt"
    assert robots_url_for("http://example.com:8080/x") == "http://example.com:8080/robots.txt"


def test_prefix_rule_blocks_subpaths():
    decision = evaluate_robots_txt(ROBOTS, "/private/listing", "demandscan")
    assert not decision.allowed
    assert decision.rule == "/private"


def test_prefix_rule_allows_other_paths():
    assert evaluate_robots_txt(ROBOTS, "/public/listing", "demandscan").allowed


def test_root_disallow_blocks_everything():
    assert not evaluate_robots_txt("User-agent: *\nDisallow: /", "/anything", "demandscan").allowed


def test_empty_disallow_allows_everything():
    assert evaluate_robots_txt("User-agent: *\nDisallow:", "/anything", "demandscan").allowed


def test_groups_for_other_agents_ignored():
    robots = "User-agent: googlebot\nDisallow: /\n\nUser-agent: *\nDisallow: /admin\n"
    assert evaluate_robots_txt(robots, "/listings", "demandscan").allowed
    assert not evaluate_robots_txt(robots, "/admin/x", "demandscan").allowed


def test_own_agent_group_matched_case_insensitively():
    robots = "User-agent: DemandScanBot\nDisallow: /Forum\n"
    assert not evaluate_robots_txt(robots, "/forum/topic", "demandscan").allowed


def _policy(handler, fail_open=True):
    backend = HttpBackend(transport=httpx.MockTransport(handler))
    return RobotsPolicy(backend, agent_token="demandscan", fail_open=fail_open)


async def test_policy_applies_fetched_robots(site, backend):
    site.add("https://example.com/robots.txt", ROBOTS, content_type="text/plain")
    policy = RobotsPolicy(backend)

    assert not await policy.is_allowed("https://example.com/private/listing")
    assert await policy.is_allowed("https://example.com/public/listing")
    assert site.fetched("https://example.com/robots.txt") == 2


async def test_missing_robots_fails_open(site, backend):
    policy = RobotsPolicy(backend)
    decision = await policy.check("https://example.com/page")
    assert decision.allowed
    assert "404" in decision.reason


async def test_unreachable_robots_fails_open():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    assert await _policy(handler).is_allowed("https://example.com/page")


async def test_fail_closed_when_configured():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    assert not await _policy(handler, fail_open=False).is_allowed("https://example.com/page")

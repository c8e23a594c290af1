from types import SimpleNamespace

from demandscan.core.config.models import DetectionConfig
from demandscan.core.detect.matcher import KeywordMatcher, KeywordSets, confidence_score
from demandscan.core.detect.snippet import extract_snippet


def kw(keyword, category):
    return SimpleNamespace(keyword=keyword, category=category)


def content(text, id="c1"):
    return SimpleNamespace(id=id, source_id="s1", source_url="https://x.example/", raw_text=text)


KEYWORDS = KeywordSets.from_keywords([
    kw("Solar Panel", "product"),
    kw("inverter", "product"),
    kw("looking for", "intent"),
    kw("urgent", "intent"),
    kw("lagos", "location"),
])


def test_location_keywords_ignored():
    assert KEYWORDS.product == ["solar panel", "inverter"]
    assert KEYWORDS.intent == ["looking for", "urgent"]


def test_intent_without_product_is_not_a_lead():
    matcher = KeywordMatcher(KEYWORDS)
    assert matcher.evaluate(content("Urgent help needed in Lagos today")) is None


def test_product_without_intent_is_not_a_lead():
    matcher = KeywordMatcher(KEYWORDS)
    assert matcher.evaluate(content("Inverter prices have gone up this month")) is None


def test_two_products_one_intent_scores_45():
    matcher = KeywordMatcher(KEYWORDS)

    lead = matcher.evaluate(content("I am LOOKING FOR a solar panel and an inverter"))

    assert lead is not None
    assert lead.confidence_score == 45
    assert lead.matched_keywords == ["solar panel", "inverter", "looking for"]
    assert lead.fetched_content_id == "c1"


def test_score_capped():
    assert confidence_score(7) == 100
    assert confidence_score(6) == 90
    assert confidence_score(3, per_match=10, cap=25) == 25


def test_score_uses_config():
    matcher = KeywordMatcher(KEYWORDS, DetectionConfig(score_per_match=20, max_score=50))
    lead = matcher.evaluate(content("urgent: looking for solar panel and inverter"))
    assert lead.confidence_score == 50


def test_substring_matching_is_not_word_bounded():
    sets = KeywordSets.from_keywords([kw("pan", "product"), kw("need", "intent")])
    lead = KeywordMatcher(sets).evaluate(content("We need solar panels"))
    assert lead is not None


def test_empty_text_skipped():
    assert KeywordMatcher(KEYWORDS).evaluate(content(None)) is None


def test_scan_keeps_order_and_drops_non_matches():
    matcher = KeywordMatcher(KEYWORDS)
    leads = matcher.scan([
        content("looking for inverter", id="a"),
        content("nothing here", id="b"),
        content("urgent solar panel", id="c"),
    ])
    assert [lead.fetched_content_id for lead in leads] == ["a", "c"]


def test_snippet_centered_on_first_product_keyword():
    text = "x" * 300 + " solar panel wanted " + "y" * 300
    lead = KeywordMatcher(KEYWORDS).evaluate(content(text + " looking for"))
    assert lead.snippet.startswith("...")
    assert lead.snippet.endswith("...")
    assert "solar panel" in lead.snippet


def test_snippet_without_cut_has_no_ellipsis():
    assert extract_snippet("need a generator", "generator") == "need a generator"


def test_snippet_bounds():
    text = "a" * 200 + "KEY" + "b" * 200
    snippet = extract_snippet(text, "key", context_chars=10)
    assert snippet == "..." + "a" * 10 + "KEY" + "b" * 10 + "..."


def test_snippet_keyword_missing_falls_back_to_prefix():
    assert extract_snippet("z" * 500, "absent", context_chars=5) == "z" * 10

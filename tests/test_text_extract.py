from demandscan.core.extract.text import decode_entities, extract_visible_text, html_to_text


def test_scripts_removed_and_entities_decoded():
    html = "<p>Hello <b>&amp;</b> World</p><script>x()</script>"
    assert html_to_text(html) == "Hello & World"


def test_style_and_noscript_removed_with_content():
    html = "<style>.a{color:red}</style><NOSCRIPT>enable js</NOSCRIPT><div>Visible</div>"
    assert html_to_text(html) == "Visible"


def test_tags_become_separators():
    assert html_to_text("<li>solar</li><li>panel</li>") == "solar panel"


def test_whitespace_collapsed():
    assert html_to_text("  a \n\n\t b  ") == "a b"


def test_named_and_numeric_entities():
    assert decode_entities("&lt;a&gt; &quot;q&quot; &#39;s&#39; &#65;&nbsp;x") == "<a> \"q\" 's' A x"


def test_out_of_range_numeric_entity_left_alone():
    assert decode_entities("&#99999999999;") == "&#99999999999;"


def test_surrogate_pair_entities_joined():
    assert decode_entities("home &#55357;&#56832; come") == "home \U0001F600 come"


def test_lone_surrogate_entity_replaced():
    text = decode_entities("a &#55357; b &#56832;")
    assert text == "a \ufffd b \ufffd"
    assert text.encode("utf-8")


def test_truncated_to_max_chars():
    text = html_to_text("<p>" + "word " * 100 + "</p>", max_chars=20)
    assert len(text) == 20


def test_short_text_is_not_meaningful():
    assert extract_visible_text("<p>Too short</p>") is None


def test_text_at_minimum_length_is_kept():
    body = "x" * 50
    assert extract_visible_text(f"<p>{body}</p>") == body


def test_min_chars_configurable():
    assert extract_visible_text("<p>Hello &amp; World</p>", min_chars=5) == "Hello & World"

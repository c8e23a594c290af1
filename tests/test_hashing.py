from demandscan.core.normalize.hashing import content_hash


def test_empty_string():
    assert content_hash("") == "0"


def test_single_character():
    assert content_hash("a") == "61"


def test_known_values():
    # "ab" = 97 * 31 + 98
    assert content_hash("ab") == format(97 * 31 + 98, "x")
    assert content_hash("hello") == format(99162322, "x")


def test_overflow_renders_signed():
    # Java-compatible "polygenelubricants".hashCode() == Integer.MIN_VALUE
    assert content_hash("polygenelubricants") == "-80000000"


def test_astral_characters_hashed_as_surrogate_pairs():
    h = 0
    for unit in (0xD83D, 0xDE00):
        h = (h * 31 + unit) & 0xFFFFFFFF
    assert content_hash("\U0001F600") == format(h, "x")


def test_same_text_same_hash():
    text = "Looking for solar panel in Lagos"
    assert content_hash(text) == content_hash(text)
    assert content_hash(text) != content_hash(text + ".")

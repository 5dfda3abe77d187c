import pytest

from mindlog.suggestions.matching import find_match, is_duplicate, is_same_item, normalize


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("  Read   More\tBooks!  ", "read more books"),
        ("“Drink water.”", "drink water"),
        ("...Walk daily...", "walk daily"),
        ("", ""),
        (None, ""),
        ("!!!", ""),
    ],
)
def test_normalize(raw, expected):
    assert normalize(raw) == expected


def test_normalize_is_idempotent():
    once = normalize("  Meditate   10 MIN daily. ")
    assert normalize(once) == once


def test_exact_match_after_normalization():
    assert is_duplicate("Read more books.", ["read  more books"])


def test_substring_either_direction():
    assert is_duplicate("read more books daily", ["Read more books"])
    assert is_duplicate("Budget", ["Set a monthly budget"])


def test_shared_keyword_stem():
    assert is_duplicate("meditate 10 min daily", ["Daily meditation"])
    assert is_duplicate("Go for a morning run", ["Start running again"])


def test_permissive_short_text_false_positive_is_kept():
    assert is_duplicate("Read to kids", ["Read"])


def test_distinct_items_do_not_match():
    assert not is_duplicate("Call mom on Sundays", ["Finish tax return", "Learn Spanish"])


def test_empty_candidate_never_matches():
    assert not is_duplicate("", ["anything"])
    assert not is_duplicate("  ?! ", ["?!"])
    assert not is_same_item("", "")


def test_empty_existing_list():
    assert not is_duplicate("Read more books", [])


def test_find_match_returns_original_text():
    existing = ["Learn Spanish", "Read more books"]
    assert find_match("read more books this year", existing) == "Read more books"
    assert find_match("Plan a trip", existing) is None

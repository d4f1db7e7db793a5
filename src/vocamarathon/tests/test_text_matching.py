"""Tests for answer normalization, expansion and matching."""
import pytest

from vocamarathon.models.drill_models import MatchResult
from vocamarathon.services.text_matching import (
    check_answer,
    clean_for_display,
    expand_variations,
    levenshtein_distance,
    match_answer,
    normalize,
    typo_threshold,
)


def test_normalize_basic() -> None:
    """Test lower-casing, whitespace and punctuation handling."""
    assert normalize("  Hello,   World!  ") == "hello world"
    assert normalize("Really?; yes: no.") == "really yes no"
    assert normalize("") == ""
    assert normalize(None) == ""


def test_normalize_unicode_spaces() -> None:
    """Test that space-like characters become plain spaces."""
    assert normalize("good\u00a0morning") == "good morning"
    assert normalize("good\u2003\u2009morning") == "good morning"
    assert normalize("\ufeffhello\u3000") == "hello"
    assert normalize("a\u200bb") == "a b"


@pytest.mark.parametrize("text", [
    "  Hello,   World!  ",
    "a , b",
    "x . y !",
    "  Pick (up) . ",
    "Ça va?",
    "",
    "  ,  ",
])
def test_normalize_idempotent(text: str) -> None:
    """Test that normalizing twice changes nothing."""
    once = normalize(text)
    assert normalize(once) == once


def test_clean_for_display() -> None:
    """Test removal of pronunciation, tags and markers."""
    assert clean_for_display("nice /nais/ (adj.)") == "nice"
    assert clean_for_display("run (V.)") == "run"
    assert clean_for_display("give up (phr v.)") == "give up"
    assert clean_for_display("gone, p.p.") == "gone"
    assert clean_for_display("*star*") == "star"
    assert clean_for_display("/ˈwɔːtə/ water") == "water"
    assert clean_for_display(None) == ""


def test_clean_keeps_slash_alternatives() -> None:
    """Test that alternatives are not mistaken for pronunciation."""
    assert clean_for_display("bratr/sestra") == "bratr/sestra"
    assert clean_for_display("vysoký /á /é") == "vysoký /á /é"


def test_expand_strips_markup() -> None:
    """Test that markup alone does not produce variants."""
    assert expand_variations("nice /nais/ (adj.)") == {"nice"}


def test_expand_full_word_alternative() -> None:
    """Test alternatives longer than a suffix."""
    assert expand_variations("bratr/sestra") == {"bratr", "sestra"}
    assert expand_variations("big / large") == {"big", "large"}


def test_expand_suffix_fragments() -> None:
    """Test suffix fragments replacing the end of the base."""
    assert expand_variations("vysoký /á /é") == {"vysoký", "vysoká", "vysoké", "á", "é"}
    assert expand_variations("hezký/-á") == {"hezký", "hezká", "-á"}


def test_expand_optional_fragment() -> None:
    """Test parenthesized optional parts."""
    assert expand_variations("pick (up)") == {"pick up", "pick"}
    assert expand_variations("pick (up) /pɪk/ (phr v.)") == {"pick up", "pick"}


def test_expand_short_full_word_is_treated_as_suffix() -> None:
    """Three-letter alternatives follow the suffix rule, producing an extra blend."""
    variations = expand_variations("kitten/cat")
    assert variations == {"kitten", "kitcat", "cat"}


def test_expand_empty() -> None:
    """Test that empty input gives no candidates."""
    assert expand_variations("") == set()
    assert expand_variations(None) == set()
    assert expand_variations("/nais/ (adj.)") == set()


def test_levenshtein_distance() -> None:
    """Test classic edit distances."""
    assert levenshtein_distance("kitten", "sitting") == 3
    assert levenshtein_distance("sitting", "kitten") == 3
    assert levenshtein_distance("", "abc") == 3
    assert levenshtein_distance("abc", "") == 3
    assert levenshtein_distance("same", "same") == 0
    assert levenshtein_distance("flaw", "lawn") == 2


def test_typo_threshold() -> None:
    """Test tolerance scaling with answer length."""
    assert typo_threshold(2) == 0
    assert typo_threshold(3) == 0
    assert typo_threshold(4) == 1
    assert typo_threshold(8) == 1
    assert typo_threshold(9) == 2


def test_match_exact() -> None:
    """Test exact matches after normalization."""
    assert match_answer("Understand!", ["understand"]) is MatchResult.ACCEPTED_EXACT
    assert match_answer("  PICK  up ", ["pick up", "pick"]) is MatchResult.ACCEPTED_EXACT


def test_match_typo() -> None:
    """Test acceptance within the typo budget."""
    assert match_answer("understnd", ["understand"]) is MatchResult.ACCEPTED_TYPO
    assert match_answer("butiful", ["beautiful"]) is MatchResult.ACCEPTED_TYPO
    assert match_answer("hause", ["house"]) is MatchResult.ACCEPTED_TYPO
    assert match_answer("hoose", ["house"]) is MatchResult.ACCEPTED_TYPO


def test_match_rejected() -> None:
    """Test answers beyond the typo budget."""
    assert match_answer("gp", ["go"]) is MatchResult.REJECTED
    assert match_answer("hosue", ["house"]) is MatchResult.REJECTED
    assert match_answer("butfl", ["beautiful"]) is MatchResult.REJECTED


def test_match_without_candidates() -> None:
    """Test that an empty candidate set rejects every answer."""
    assert match_answer("anything", []) is MatchResult.REJECTED
    assert match_answer("", []) is MatchResult.REJECTED
    assert match_answer("", ["a"]) is MatchResult.REJECTED


def test_check_answer() -> None:
    """Test expansion and matching together."""
    assert check_answer("sestra", "bratr/sestra") is MatchResult.ACCEPTED_EXACT
    assert check_answer("vysoká", "vysoký /á /é") is MatchResult.ACCEPTED_EXACT
    assert check_answer("pick", "pick (up) (phr v.)") is MatchResult.ACCEPTED_EXACT
    assert check_answer("nice", "nice /nais/ (adj.)") is MatchResult.ACCEPTED_EXACT
    assert check_answer("noise", "nice /nais/ (adj.)") is MatchResult.REJECTED
    assert check_answer("anything", "") is MatchResult.REJECTED

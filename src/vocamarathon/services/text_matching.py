"""Answer checking: normalization, variant expansion and typo-tolerant matching.

Vocabulary entries come from noisy source documents, so one stored string
such as ``"pick (up) /pɪk/ (phr v.)"`` or ``"vysoký /á /é"`` stands for
several literal answers. :func:`expand_variations` turns it into that set,
:func:`normalize` canonicalizes both sides and :func:`match_answer` accepts
exact hits or answers within a small, length-scaled edit distance.

None of these functions raise on malformed input.
"""
import logging
import re
from typing import Iterable, Optional, Set

from vocamarathon.models.drill_models import MatchResult

logger = logging.getLogger(__name__)

# No-break, Ogham, Mongolian vowel separator, en/em/thin/hair and zero-width
# spaces, narrow no-break, medium mathematical, ideographic space, BOM
_SPACE_LIKE = re.compile("[\u00A0\u1680\u180E\u2000-\u200B\u202F\u205F\u3000\uFEFF]")
_WHITESPACE = re.compile(r"\s+")
_PUNCTUATION = re.compile(r"[.,!?;:]")

_PRONUNCIATION = re.compile(r"(?:^|(?<=\s))/(?:[^/\s]|[^/\s][^/]*[^/\s])/(?=\s|$|[(,])")
_PART_OF_SPEECH = re.compile(r"\((?:v\.|n\.|adj\.|adv\.|prep\.|pron\.|phr\.|phr\s?v\.)\)", re.IGNORECASE)
_PAST_PARTICIPLE = re.compile(r",\s*p\.p\.")
_OPTIONAL_FRAGMENT = re.compile(r"\([^)]+\)")
_PARENTHESES = re.compile(r"[()]")

MAX_SUFFIX_LENGTH = 3


def normalize(text: Optional[str]) -> str:
    """Canonical form used for comparing answers.

    >>> normalize("  Hello,   World!  ")
    'hello world'
    """
    if not text:
        return ""
    text = text.lower()
    text = _SPACE_LIKE.sub(" ", text)
    # Punctuation goes before whitespace collapsing so the result is idempotent
    text = _PUNCTUATION.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def clean_for_display(text: Optional[str]) -> str:
    """Strip pronunciation, part-of-speech tags and other markup."""
    if not text:
        return ""
    text = _PRONUNCIATION.sub("", text)
    text = _PART_OF_SPEECH.sub("", text)
    text = _PAST_PARTICIPLE.sub("", text)
    text = text.replace("*", "")
    return _collapse(text)


def _is_suffix_fragment(part: str) -> bool:
    # Short full words ("cat", "pes") are indistinguishable from suffixes here
    return part.startswith("-") or (len(part) <= MAX_SUFFIX_LENGTH and " " not in part)


def _apply_suffix(base: str, part: str) -> str:
    fragment = part[1:] if part.startswith("-") else part
    stem = base[:max(0, len(base) - len(fragment))]
    return stem + fragment


def expand_variations(text: Optional[str]) -> Set[str]:
    """All literal answers a stored vocabulary string stands for.

    ``"vysoký /á /é"`` gives ``{"vysoký", "vysoká", "vysoké", "á", "é"}``,
    ``"bratr/sestra"`` gives ``{"bratr", "sestra"}`` and ``"pick (up)"``
    gives ``{"pick up", "pick"}``.
    """
    clean = clean_for_display(text)

    parts = [part.strip() for part in clean.split("/")]
    base = parts[0]
    results = [base]
    for part in parts[1:]:
        if _is_suffix_fragment(part):
            results.append(_apply_suffix(base, part))
            results.append(part)
        else:
            results.append(part)

    expanded = set()
    for value in results:
        if "(" in value and ")" in value:
            expanded.add(_collapse(_PARENTHESES.sub("", value)))
            expanded.add(_collapse(_OPTIONAL_FRAGMENT.sub("", value)))
        else:
            expanded.add(value)

    return {value for value in expanded if value}


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance with unit-cost insert, delete and substitute."""
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            ))
        previous = current
    return previous[-1]


def typo_threshold(length: int) -> int:
    """Number of edits tolerated for an answer of the given length."""
    if length > 8:
        return 2
    if length > 3:
        return 1
    return 0


def match_answer(user_input: Optional[str], candidates: Iterable[str]) -> MatchResult:
    """Compare a typed answer with the accepted variants."""
    answer = normalize(user_input)
    normalized = [c for c in (normalize(candidate) for candidate in candidates) if c]

    if answer in normalized:
        return MatchResult.ACCEPTED_EXACT

    for candidate in normalized:
        distance = levenshtein_distance(candidate, answer)
        if 0 < distance <= typo_threshold(len(candidate)):
            logger.debug(f"Accepting {answer!r} as a typo of {candidate!r} (distance {distance})")
            return MatchResult.ACCEPTED_TYPO

    return MatchResult.REJECTED


def check_answer(user_input: Optional[str], answer_text: Optional[str]) -> MatchResult:
    """Expand the stored answer text and match the typed answer against it."""
    return match_answer(user_input, expand_variations(answer_text))

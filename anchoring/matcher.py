"""
Quote matching for TextQuoteSelector.

Uses difflib.SequenceMatcher for similarity scoring. Exact occurrences of the
quote are preferred; fuzzy windows are only considered when the quote no
longer appears verbatim.
"""

import re
from collections import Counter
from dataclasses import dataclass
from difflib import SequenceMatcher

from anchoring.config import (
    FUZZY_LENGTH_TOLERANCE,
    FUZZY_MAX_CANDIDATES,
    FUZZY_THRESHOLD,
    MIN_SIGNIFICANT_WORD_LENGTH,
    POSITION_WEIGHT,
    PREFIX_WEIGHT,
    QUOTE_WEIGHT,
    SUFFIX_WEIGHT,
)

WORD_PATTERN = re.compile(r"\S+")


@dataclass(frozen=True)
class QuoteMatch:
    """
    A candidate location for a quote.

    Attributes:
        start: Character offset where the match begins
        end: Character offset where the match ends
        score: Combined score in [0, 1] (quote, context and hint proximity)
        exact: True if the matched text equals the quote
    """

    start: int
    end: int
    score: float
    exact: bool


def similarity_score(s1: str, s2: str) -> float:
    """
    Calculate similarity score between two strings using SequenceMatcher.

    Returns a float between 0.0 (completely different) and 1.0 (identical).
    """
    if not s1 and not s2:
        return 1.0
    if not s1 or not s2:
        return 0.0
    return SequenceMatcher(None, s1, s2).ratio()


def match_quote(
    text: str,
    exact: str,
    prefix: str | None = None,
    suffix: str | None = None,
    hint: int | None = None,
    threshold: float = FUZZY_THRESHOLD,
) -> QuoteMatch | None:
    """
    Find the best location of a quote in text.

    Algorithm:
    1. Collect exact occurrences of the quote; if there are none, collect
       windows aligned on the significant words they share with it
    2. Score each candidate:
       (50 * quote + 20 * prefix + 20 * suffix + 2 * position) / 92
       where position rewards candidates close to ``hint``
    3. Drop fuzzy candidates whose quote-and-context score is below threshold
    4. Return the best candidate, preferring the earlier one on ties

    Args:
        text: The text to search in
        exact: The quoted text
        prefix: Expected text immediately before the quote
        suffix: Expected text immediately after the quote
        hint: Expected start offset of the quote
        threshold: Minimum quote-and-context score for fuzzy candidates

    Returns:
        The best match, or None if the quote cannot be found
    """
    if not exact or len(text) == 0:
        return None

    candidates = _find_exact_candidates(text, exact)
    is_exact = bool(candidates)
    if not is_exact:
        candidates = _find_fuzzy_candidates(text, exact, hint)

    best: QuoteMatch | None = None
    for start, end in candidates:
        candidate_text = text[start:end]
        quote_score = 1.0 if is_exact else similarity_score(exact, candidate_text)
        prefix_start = max(0, start - len(prefix or ""))
        prefix_score = _context_score(prefix, text[prefix_start:start])
        suffix_score = _context_score(suffix, text[end : end + len(suffix or "")])

        if not is_exact:
            # Context-weighted score, as used for fuzzy quote resolution
            weighted = quote_score * 0.5 + prefix_score * 0.25 + suffix_score * 0.25
            if weighted < threshold:
                continue

        position_score = _position_score(start, hint, len(text))
        score = (
            QUOTE_WEIGHT * quote_score
            + PREFIX_WEIGHT * prefix_score
            + SUFFIX_WEIGHT * suffix_score
            + POSITION_WEIGHT * position_score
        ) / (QUOTE_WEIGHT + PREFIX_WEIGHT + SUFFIX_WEIGHT + POSITION_WEIGHT)

        if best is None or score > best.score or (
            score == best.score and start < best.start
        ):
            best = QuoteMatch(start=start, end=end, score=score, exact=is_exact)

    return best


def _context_score(expected: str | None, actual: str) -> float:
    # No context to match = perfect match
    if not expected:
        return 1.0
    return similarity_score(expected, actual)


def _position_score(start: int, hint: int | None, text_length: int) -> float:
    if hint is None:
        return 1.0
    return max(0.0, 1.0 - abs(start - hint) / text_length)


def _find_exact_candidates(text: str, exact: str) -> list[tuple[int, int]]:
    """Find every (possibly overlapping) occurrence of the quote."""
    candidates: list[tuple[int, int]] = []
    search_start = 0
    while True:
        pos = text.find(exact, search_start)
        if pos == -1:
            break
        candidates.append((pos, pos + len(exact)))
        search_start = pos + 1
    return candidates


def _find_fuzzy_candidates(
    text: str, exact: str, hint: int | None = None
) -> list[tuple[int, int]]:
    """
    Find windows of similar length around shared significant words.

    Every occurrence in ``text`` of a significant quote word proposes a window
    start, aligned so the word sits where it does in the quote. Starts backed
    by the most words (then closest to ``hint``) are kept, up to
    FUZZY_MAX_CANDIDATES, and each is narrowed to the span its matching
    blocks cover.

    Returns list of (start, end) tuples.
    """
    quote_words: dict[str, list[int]] = {}
    for word in WORD_PATTERN.finditer(exact):
        key = word.group().lower()
        if len(key) > MIN_SIGNIFICANT_WORD_LENGTH:
            quote_words.setdefault(key, []).append(word.start())
    if not quote_words:
        return []

    votes: Counter[int] = Counter()
    for word in WORD_PATTERN.finditer(text):
        for offset in quote_words.get(word.group().lower(), ()):
            votes[word.start() - offset] += 1

    def rank(start: int) -> tuple[int, int, int]:
        distance = abs(start - hint) if hint is not None else 0
        return (-votes[start], distance, start)

    exact_len = len(exact)
    tolerance = int(exact_len * FUZZY_LENGTH_TOLERANCE)
    candidates: list[tuple[int, int]] = []
    for aligned in sorted(votes, key=rank)[:FUZZY_MAX_CANDIDATES]:
        region_start = max(0, aligned - tolerance)
        region_end = min(len(text), aligned + exact_len + tolerance)
        span = _matched_span(exact, text[region_start:region_end])
        if span is None:
            continue
        candidate = (region_start + span[0], region_start + span[1])
        if candidate not in candidates:
            candidates.append(candidate)

    return candidates


def _matched_span(exact: str, region: str) -> tuple[int, int] | None:
    """Span of ``region`` covered by the blocks it shares with the quote."""
    matcher = SequenceMatcher(None, exact, region, autojunk=False)
    blocks = [b for b in matcher.get_matching_blocks() if b.size > 0]
    # Stray one- or two-character blocks would stretch the span
    solid = [b for b in blocks if b.size >= 3] or blocks
    if not solid:
        return None
    return solid[0].b, solid[-1].b + solid[-1].size


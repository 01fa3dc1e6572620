"""
Relevance scoring and highlight extraction for full-text content search.

A document is scored on three signals, each normalised to [0, 1]:

    frequency  n / (n + sqrt(word_count)) — more hits in a shorter
               document score higher
    position   1.0 when the first hit is inside the leading
               ``title_region`` characters, then title_region / (pos + 1)
    exactness  1.0 for a literal phrase hit, otherwise half the fraction
               of distinct search tokens found

    score = 0.5 * frequency + 0.25 * position + 0.25 * exactness

Each signal is non-decreasing in "more matches" and "earlier match", so a
document with strictly more or better-positioned hits never scores lower
than one with fewer or later hits for the same query.
"""

import math
import re
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from sec_filing_store.config.constants import (
    DEFAULT_HIGHLIGHT_WINDOW,
    DEFAULT_MAX_HIGHLIGHTS,
    DEFAULT_TITLE_REGION,
)
from sec_filing_store.core.types import DocumentSearchResult

FREQUENCY_WEIGHT = 0.5
POSITION_WEIGHT = 0.25
EXACTNESS_WEIGHT = 0.25

_ELLIPSIS = "..."
_WORD = re.compile(r"\S+")


@dataclass
class RelevanceMatch:
    """Outcome of matching one document against a query."""

    score: float
    occurrences: int
    first_position: int
    highlights: list[str] = field(default_factory=list)


def tokenize(search_text: str, case_sensitive: bool = False) -> list[str]:
    """Split a query on whitespace, dropping duplicates but keeping order."""
    seen: set[str] = set()
    tokens: list[str] = []
    for token in search_text.split():
        key = token if case_sensitive else token.casefold()
        if key not in seen:
            seen.add(key)
            tokens.append(token)
    return tokens


def build_pattern(
    search_text: str,
    exact_match: bool = False,
    case_sensitive: bool = False,
) -> re.Pattern[str]:
    """
    Compile the regex used to find matches.

    Exact mode matches the literal phrase; token mode matches any token,
    trying longer tokens first so "revenues" wins over "revenue".
    """
    flags = 0 if case_sensitive else re.IGNORECASE
    if exact_match:
        return re.compile(re.escape(search_text.strip()), flags)

    tokens = sorted(tokenize(search_text, case_sensitive), key=len, reverse=True)
    return re.compile("|".join(re.escape(t) for t in tokens), flags)


def score_match(
    occurrences: int,
    word_count: int,
    first_position: int,
    exactness: float,
    title_region: int = DEFAULT_TITLE_REGION,
) -> float:
    """Combine the three relevance signals into a score in [0, 1]."""
    if occurrences <= 0:
        return 0.0

    frequency = occurrences / (occurrences + math.sqrt(max(word_count, 1)))
    if first_position < title_region:
        position = 1.0
    else:
        position = title_region / (first_position + 1)

    score = (
        FREQUENCY_WEIGHT * frequency
        + POSITION_WEIGHT * position
        + EXACTNESS_WEIGHT * max(0.0, min(exactness, 1.0))
    )
    return round(min(max(score, 0.0), 1.0), 4)


def extract_highlights(
    text: str,
    spans: Iterable[tuple[int, int]],
    window: int = DEFAULT_HIGHLIGHT_WINDOW,
    max_highlights: int = DEFAULT_MAX_HIGHLIGHTS,
) -> list[str]:
    """
    Cut a context snippet of ``window`` characters around each match.

    Snippets are returned in document order, never overlap, and are
    capped at ``max_highlights`` entries. Whitespace is collapsed and
    truncated edges are marked with an ellipsis.
    """
    highlights: list[str] = []
    last_end = -1

    for match_start, match_end in spans:
        if len(highlights) >= max_highlights:
            break
        start = max(0, match_start - window)
        end = min(len(text), match_end + window)
        if start < last_end:
            continue
        snippet = " ".join(text[start:end].split())
        if start > 0:
            snippet = _ELLIPSIS + snippet
        if end < len(text):
            snippet = snippet + _ELLIPSIS
        highlights.append(snippet)
        last_end = end

    return highlights



@dataclass
class _MatchTally:
    """Running totals over a stream of matches."""

    case_sensitive: bool = False
    occurrences: int = 0
    first_position: int = -1
    found: set[str] = field(default_factory=set)

    def spans(self, pattern: re.Pattern[str], text: str) -> Iterator[tuple[int, int]]:
        for m in pattern.finditer(text):
            if self.occurrences == 0:
                self.first_position = m.start()
            self.occurrences += 1
            self.found.add(m.group(0) if self.case_sensitive else m.group(0).casefold())
            yield m.span()


def match_document(
    text: str,
    search_text: str,
    exact_match: bool = False,
    case_sensitive: bool = False,
    highlight_window: int = DEFAULT_HIGHLIGHT_WINDOW,
    max_highlights: int = DEFAULT_MAX_HIGHLIGHTS,
    title_region: int = DEFAULT_TITLE_REGION,
) -> Optional[RelevanceMatch]:
    """
    Score a document's text against a query.

    Args:
        text: Full document text.
        search_text: Query phrase or space-separated tokens.
        exact_match: Match the literal phrase instead of any token.
        case_sensitive: Disable case folding.
        highlight_window: Context characters on each side of a match.
        max_highlights: Upper bound on returned highlights.
        title_region: Leading characters treated as title/header text.

    Returns:
        RelevanceMatch, or None when the document has no match.
    """
    if not text or not search_text or not search_text.strip():
        return None

    pattern = build_pattern(search_text, exact_match, case_sensitive)
    tally = _MatchTally(case_sensitive=case_sensitive)
    spans = tally.spans(pattern, text)
    highlights = extract_highlights(
        text,
        spans,
        window=highlight_window,
        max_highlights=max_highlights,
    )
    # Count the remaining matches without keeping them.
    deque(spans, maxlen=0)
    if tally.occurrences == 0:
        return None

    if exact_match:
        exactness = 1.0
    else:
        phrase = re.compile(
            re.escape(search_text.strip()),
            0 if case_sensitive else re.IGNORECASE,
        )
        if phrase.search(text):
            exactness = 1.0
        else:
            tokens = tokenize(search_text, case_sensitive)
            wanted = {t if case_sensitive else t.casefold() for t in tokens}
            exactness = 0.5 * len(tally.found & wanted) / len(wanted)

    word_count = sum(1 for _ in _WORD.finditer(text))

    return RelevanceMatch(
        score=score_match(
            occurrences=tally.occurrences,
            word_count=word_count,
            first_position=tally.first_position,
            exactness=exactness,
            title_region=title_region,
        ),
        occurrences=tally.occurrences,
        first_position=tally.first_position,
        highlights=highlights,
    )


def rank_results(results: list[DocumentSearchResult]) -> list[DocumentSearchResult]:
    """Sort by relevance descending, ties by filing date descending."""
    return sorted(
        results,
        key=lambda r: (r.relevance_score, r.filing_date.toordinal()),
        reverse=True,
    )

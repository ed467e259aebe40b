from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from ol_doc_pipeline_core.models import PageResult

SIMILARITY_THRESHOLD = 0.9

_NON_ALNUM_RE = re.compile(r"[^\w\s]|_")


def _tokens(text: str) -> set[str]:
    normalized = _NON_ALNUM_RE.sub("", (text or "").lower())
    return set(normalized.split())


def jaccard_similarity(a: str, b: str) -> float:
    """
    Jaccard similarity of the word sets of `a` and `b`, in [0, 1].

    Case and punctuation are ignored. Two texts without any words are identical (1.0);
    one empty and one non-empty text share nothing (0.0).
    """
    return _token_similarity(_tokens(a), _tokens(b))


@dataclass(frozen=True)
class DeduplicationResult:
    unique: list[PageResult] = field(default_factory=list)
    # Positions in the input results list, not in `unique`.
    duplicate_indices: list[int] = field(default_factory=list)


def deduplicate_pages(
    results: Sequence[PageResult],
    *,
    threshold: float = SIMILARITY_THRESHOLD,
) -> DeduplicationResult:
    """
    Drop near-duplicate pages, keeping the first occurrence.

    Each successful page is compared against every page kept so far; failed pages are
    ignored entirely and show up in neither output list. Quadratic in the number of
    successful pages.
    """
    kept: list[PageResult] = []
    kept_tokens: list[set[str]] = []
    duplicate_indices: list[int] = []

    for idx, result in enumerate(results):
        if not result.success or result.content is None:
            continue
        candidate = _tokens(result.content)
        if any(_token_similarity(candidate, seen) >= threshold for seen in kept_tokens):
            duplicate_indices.append(idx)
            continue
        kept.append(result)
        kept_tokens.append(candidate)

    return DeduplicationResult(unique=kept, duplicate_indices=duplicate_indices)


def _token_similarity(set_a: set[str], set_b: set[str]) -> float:
    if not set_a and not set_b:
        return 1.0
    if not set_a or not set_b:
        return 0.0
    return len(set_a & set_b) / len(set_a | set_b)

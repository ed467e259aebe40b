from __future__ import annotations

import pytest

from ol_doc_pipeline_core.dedup import SIMILARITY_THRESHOLD, deduplicate_pages, jaccard_similarity
from ol_doc_pipeline_core.errors import ExtractionError
from ol_doc_pipeline_core.models import PageResult


def ok(n: int, content: str) -> PageResult:
    return PageResult(page_number=n, content=content, success=True)


def failed(n: int) -> PageResult:
    return PageResult(page_number=n, content=None, success=False, error=ExtractionError("x"))


def test_threshold_constant() -> None:
    assert SIMILARITY_THRESHOLD == 0.9


@pytest.mark.parametrize(
    "text",
    ["", "hello", "Lecture 3: Graph traversal (BFS, DFS)", "  spaced   out\n\ttext  "],
)
def test_jaccard_is_reflexive(text: str) -> None:
    assert jaccard_similarity(text, text) == 1.0


def test_jaccard_partial_overlap() -> None:
    assert jaccard_similarity("hello world", "hello universe") == pytest.approx(1 / 3)


def test_jaccard_is_symmetric() -> None:
    a = "Dynamic programming: memoization and tabulation"
    b = "Memoization vs tabulation in dynamic programs"
    assert jaccard_similarity(a, b) == jaccard_similarity(b, a)


def test_jaccard_ignores_case_punctuation_and_whitespace() -> None:
    assert jaccard_similarity("Hello, World!", "hello   world") == 1.0
    assert jaccard_similarity("snake_case", "snakecase") == 1.0


def test_jaccard_uses_unique_tokens() -> None:
    assert jaccard_similarity("a a a b", "a b") == 1.0


def test_jaccard_empty_cases() -> None:
    assert jaccard_similarity("", "") == 1.0
    assert jaccard_similarity("!!!", "...") == 1.0
    assert jaccard_similarity("", "something") == 0.0
    assert jaccard_similarity("something", "?") == 0.0


def test_identical_pages_keep_only_first() -> None:
    results = [ok(i, "Binary search trees: insert, delete, lookup") for i in range(4)]
    dedup = deduplicate_pages(results)

    assert [r.page_number for r in dedup.unique] == [0]
    assert dedup.duplicate_indices == [1, 2, 3]


def test_failed_pages_are_neither_unique_nor_duplicate() -> None:
    dedup = deduplicate_pages([ok(0, "x"), failed(1), ok(2, "x")])

    assert dedup.unique == [ok(0, "x")]
    assert dedup.duplicate_indices == [2]


def test_distinct_pages_are_all_kept() -> None:
    results = [ok(0, "sorting algorithms"), ok(1, "graph algorithms"), ok(2, "string matching")]
    dedup = deduplicate_pages(results)

    assert dedup.unique == results
    assert dedup.duplicate_indices == []


def test_near_duplicate_at_threshold_is_flagged() -> None:
    base = " ".join(f"w{i}" for i in range(9))
    # 9 shared tokens out of 10 in the union -> exactly 0.9
    dedup = deduplicate_pages([ok(0, base), ok(1, base + " extra")])
    assert dedup.duplicate_indices == [1]


def test_below_threshold_is_kept() -> None:
    base = " ".join(f"w{i}" for i in range(8))
    # 8 / 9 < 0.9
    dedup = deduplicate_pages([ok(0, base), ok(1, base + " extra")])
    assert dedup.duplicate_indices == []
    assert len(dedup.unique) == 2


def test_candidate_compared_against_every_kept_page() -> None:
    results = [ok(0, "alpha beta"), ok(1, "gamma delta"), ok(2, "Gamma, delta."), ok(3, "ALPHA beta")]
    dedup = deduplicate_pages(results)

    assert [r.page_number for r in dedup.unique] == [0, 1]
    assert dedup.duplicate_indices == [2, 3]


def test_duplicate_indices_are_positions_in_input() -> None:
    results = [failed(0), failed(1), ok(2, "same"), failed(3), ok(4, "same")]
    dedup = deduplicate_pages(results)

    assert [r.page_number for r in dedup.unique] == [2]
    assert dedup.duplicate_indices == [4]


def test_custom_threshold() -> None:
    dedup = deduplicate_pages([ok(0, "hello world"), ok(1, "hello universe")], threshold=0.3)
    assert dedup.duplicate_indices == [1]


def test_empty_input() -> None:
    dedup = deduplicate_pages([])
    assert dedup.unique == []
    assert dedup.duplicate_indices == []

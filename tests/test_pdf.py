from __future__ import annotations

import io

import pytest
from pypdf import PdfReader

from ol_doc_pipeline_core.errors import ParseError, RebuildError
from ol_doc_pipeline_core.pdf import count_pdf_pages, rebuild_pdf_without_pages, split_pdf_into_pages

from conftest import BASE_HEIGHT, page_width


def _widths(data: bytes) -> list[int]:
    reader = PdfReader(io.BytesIO(data))
    return [round(float(p.mediabox.width)) for p in reader.pages]


def test_split_yields_one_single_page_pdf_per_page(make_pdf) -> None:  # noqa: ANN001
    data = make_pdf(4)
    pages = split_pdf_into_pages(data)

    assert len(pages) == count_pdf_pages(data) == 4
    for i, page in enumerate(pages):
        reader = PdfReader(io.BytesIO(page))
        assert len(reader.pages) == 1
        assert round(float(reader.pages[0].mediabox.width)) == page_width(i)
        assert round(float(reader.pages[0].mediabox.height)) == BASE_HEIGHT


def test_split_handles_fifty_pages(make_pdf) -> None:  # noqa: ANN001
    pages = split_pdf_into_pages(make_pdf(50))
    assert len(pages) == 50
    assert _widths(pages[49]) == [page_width(49)]


@pytest.mark.parametrize(
    "data",
    [
        b"this is not a pdf",
        b"\x89PNG\r\n\x1a\n" + b"\x00" * 64,
        b"%PDF-1.4\n" + b"garbage body without objects\n" * 20,
        b"",
    ],
)
def test_split_rejects_malformed_input(data: bytes) -> None:
    with pytest.raises(ParseError):
        split_pdf_into_pages(data)


def test_rebuild_with_empty_set_keeps_page_count(make_pdf) -> None:  # noqa: ANN001
    data = make_pdf(3)
    rebuilt = rebuild_pdf_without_pages(data, set())
    assert count_pdf_pages(rebuilt) == 3


def test_split_then_rebuild_excluding_middle_page(make_pdf) -> None:  # noqa: ANN001
    data = make_pdf(3)
    assert len(split_pdf_into_pages(data)) == 3

    rebuilt = rebuild_pdf_without_pages(data, {1})
    assert _widths(rebuilt) == [page_width(0), page_width(2)]


def test_rebuild_down_to_single_page(make_pdf) -> None:  # noqa: ANN001
    data = make_pdf(5)
    rebuilt = rebuild_pdf_without_pages(data, [0, 1, 3, 4])
    assert _widths(rebuilt) == [page_width(2)]


def test_rebuild_rejects_out_of_range_indices(make_pdf) -> None:  # noqa: ANN001
    data = make_pdf(3)
    with pytest.raises(RebuildError):
        rebuild_pdf_without_pages(data, {3})
    with pytest.raises(RebuildError):
        rebuild_pdf_without_pages(data, {-1})


def test_rebuild_rejects_removing_every_page(make_pdf) -> None:  # noqa: ANN001
    with pytest.raises(RebuildError):
        rebuild_pdf_without_pages(make_pdf(2), {0, 1})


def test_rebuild_rejects_malformed_source() -> None:
    with pytest.raises(ParseError):
        rebuild_pdf_without_pages(b"not a pdf", {0})

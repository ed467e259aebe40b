from __future__ import annotations

from collections.abc import Iterable

from pypdf import PdfWriter

from ol_doc_pipeline_core.errors import ParseError, RebuildError
from ol_doc_pipeline_core.pdf.reader import load_pdf, write_pdf


def rebuild_pdf_without_pages(data: bytes, pages_to_remove: Iterable[int]) -> bytes:
    """
    Build the lean PDF: every source page except `pages_to_remove` (0-based), in order.

    An empty removal set returns `data` unchanged. Indices outside the document or a
    removal set covering every page raise `RebuildError`.
    """
    reader = load_pdf(data)
    page_count = len(reader.pages)

    remove = set(pages_to_remove)
    out_of_range = sorted(i for i in remove if i < 0 or i >= page_count)
    if out_of_range:
        raise RebuildError(
            f"Cannot remove pages {out_of_range}: document has {page_count} pages"
        )
    if not remove:
        return data
    if len(remove) == page_count:
        raise RebuildError(f"Cannot remove all {page_count} pages")

    writer = PdfWriter()
    try:
        for idx, page in enumerate(reader.pages):
            if idx not in remove:
                writer.add_page(page)
        return write_pdf(writer)
    except Exception as e:  # noqa: BLE001
        raise ParseError(f"Invalid PDF: rebuild failed: {e}") from e

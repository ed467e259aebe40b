from __future__ import annotations

import io

from pypdf import PdfReader, PdfWriter

from ol_doc_pipeline_core.errors import ParseError


def load_pdf(data: bytes) -> PdfReader:
    """
    Parse PDF bytes and force the page tree to load.

    pypdf reads lazily, so a valid `%PDF-` header with a broken body can pass the
    constructor and only fail when pages are touched. Both cases surface here as
    `ParseError`.
    """
    if not data:
        raise ParseError("Empty PDF payload")
    try:
        reader = PdfReader(io.BytesIO(data))
        page_count = len(reader.pages)
    except Exception as e:  # noqa: BLE001
        raise ParseError(f"Invalid PDF: {e}") from e
    if page_count == 0:
        raise ParseError("Invalid PDF: document contains no pages")
    return reader


def write_pdf(writer: PdfWriter) -> bytes:
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


def count_pdf_pages(data: bytes) -> int:
    return len(load_pdf(data).pages)

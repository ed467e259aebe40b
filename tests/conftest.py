from __future__ import annotations

import io
import os
import uuid
from collections.abc import Callable, Generator, Sequence

import psycopg
import pytest
from pypdf import PdfWriter

from ol_doc_pipeline_core.db import connect
from ol_doc_pipeline_core.migrations.runner import apply_migrations

# Page i of a generated PDF is (BASE_WIDTH + 10*i) points wide, so pages can be
# told apart after splitting/rebuilding through their mediabox.
BASE_WIDTH = 100
BASE_HEIGHT = 200


def page_width(i: int) -> int:
    return BASE_WIDTH + 10 * i


@pytest.fixture()
def make_pdf() -> Callable[..., bytes]:
    def _make(n_pages: int = 3, *, widths: Sequence[int] | None = None) -> bytes:
        writer = PdfWriter()
        for w in widths if widths is not None else [page_width(i) for i in range(n_pages)]:
            writer.add_blank_page(width=w, height=BASE_HEIGHT)
        buf = io.BytesIO()
        writer.write(buf)
        return buf.getvalue()

    return _make


@pytest.fixture(scope="session")
def pg_dsn() -> str:
    dsn = os.environ.get("PG_DSN")
    if not dsn:
        pytest.skip("PG_DSN not set; skipping DB integration tests")
    return dsn


@pytest.fixture(scope="session")
def pg_schema(pg_dsn: str) -> Generator[str, None, None]:
    schema = f"test_{uuid.uuid4().hex[:10]}"
    apply_migrations(pg_dsn, schema=schema)
    yield schema
    with psycopg.connect(pg_dsn) as conn:
        conn.execute(f'drop schema if exists "{schema}" cascade')
        conn.commit()


@pytest.fixture()
def conn(pg_dsn: str, pg_schema: str) -> Generator[psycopg.Connection, None, None]:
    with connect(pg_dsn, schema=pg_schema) as c:
        yield c

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import psycopg

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Migration:
    version: str
    path: Path


def _migrations_dir() -> Path:
    return Path(__file__).resolve().parent / "sql"


def discover_migrations() -> list[Migration]:
    return [Migration(version=p.stem, path=p) for p in sorted(_migrations_dir().glob("*.sql"))]


def _ensure_schema(conn: psycopg.Connection, schema: str) -> None:
    conn.execute(f'create schema if not exists "{schema}"')
    conn.execute(f'set search_path to "{schema}"')


def _ensure_migrations_table(conn: psycopg.Connection) -> None:
    conn.execute(
        """
        create table if not exists schema_migrations (
          version text primary key,
          applied_at timestamptz not null default now()
        )
        """
    )


def apply_migrations(
    dsn: str,
    *,
    schema: str = "ai",
    migrations: Iterable[Migration] | None = None,
) -> list[str]:
    """
    Create the `document_uploads` / `page_chunks` tables in `schema`.

    Already-recorded versions are skipped, so running this on every deploy is safe.
    """
    if migrations is None:
        migrations = discover_migrations()

    applied: list[str] = []
    with psycopg.connect(dsn) as conn:
        conn.execute("set timezone to 'UTC'")
        _ensure_schema(conn, schema)
        _ensure_migrations_table(conn)
        done = {r[0] for r in conn.execute("select version from schema_migrations").fetchall()}

        for mig in migrations:
            if mig.version in done:
                continue
            conn.execute(mig.path.read_text(encoding="utf-8"))
            conn.execute("insert into schema_migrations(version) values (%s)", (mig.version,))
            conn.commit()
            logger.info("Applied migration %s to schema %s", mig.version, schema)
            applied.append(mig.version)

    return applied

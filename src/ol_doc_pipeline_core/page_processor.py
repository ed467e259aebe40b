from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field

from ol_doc_pipeline_core.errors import ConfigurationError
from ol_doc_pipeline_core.extractor import PageExtractor
from ol_doc_pipeline_core.models import PageResult

logger = logging.getLogger(__name__)

CONCURRENCY_LIMIT = 5
MAX_RETRIES = 1
RETRY_BACKOFF_S = 1.0


@dataclass(frozen=True)
class PageProcessingConfig:
    concurrency_limit: int = CONCURRENCY_LIMIT
    max_retries: int = MAX_RETRIES
    retry_backoff_s: float = RETRY_BACKOFF_S
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.concurrency_limit <= 0:
            raise ValueError("concurrency_limit must be > 0")
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.retry_backoff_s < 0:
            raise ValueError("retry_backoff_s must be >= 0")


async def process_page_with_retry(
    page_bytes: bytes,
    page_number: int,
    api_key: str,
    *,
    extractor: PageExtractor,
    cfg: PageProcessingConfig = PageProcessingConfig(),
) -> PageResult:
    """
    Extract one page, retrying after a fixed backoff.

    Never raises for extractor failures: once retries are exhausted the last error is
    returned inside an unsuccessful `PageResult`. A `ConfigurationError` is not a page
    failure and propagates.
    """
    attempt = 0
    while True:
        try:
            content = await extractor(page_bytes, api_key)
            return PageResult(page_number=page_number, content=content, success=True)
        except ConfigurationError:
            raise
        except Exception as e:  # noqa: BLE001
            if attempt >= cfg.max_retries:
                logger.warning(
                    "Page %s failed after %s attempt(s): %s", page_number, attempt + 1, e
                )
                return PageResult(page_number=page_number, content=None, success=False, error=e)
            logger.warning(
                "Page %s attempt %s failed, retrying in %.1fs: %s",
                page_number,
                attempt + 1,
                cfg.retry_backoff_s,
                e,
            )
            await cfg.sleep(cfg.retry_backoff_s)
            attempt += 1


async def process_pages(
    pages: Sequence[bytes],
    api_key: str,
    *,
    extractor: PageExtractor,
    cfg: PageProcessingConfig = PageProcessingConfig(),
) -> list[PageResult]:
    """
    Extract every page with at most `cfg.concurrency_limit` extractor calls in flight.

    Results are index-aligned with `pages` (`result[i].page_number == i`) no matter in
    which order the calls complete.
    """
    if not pages:
        return []

    limiter = asyncio.Semaphore(cfg.concurrency_limit)
    slots: list[PageResult | None] = [None] * len(pages)

    async def _run(idx: int, page_bytes: bytes) -> None:
        async with limiter:
            slots[idx] = await process_page_with_retry(
                page_bytes, idx, api_key, extractor=extractor, cfg=cfg
            )

    await asyncio.gather(*(_run(idx, page) for idx, page in enumerate(pages)))

    results: list[PageResult] = []
    for r in slots:
        if r is None:  # pragma: no cover
            raise RuntimeError("Page slot left empty after processing")
        results.append(r)
    return results

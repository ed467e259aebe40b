from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import NAMESPACE_URL, UUID, uuid5

import httpx


def deterministic_point_id(*, document_id: UUID, page_number: int) -> UUID:
    return uuid5(NAMESPACE_URL, f"qdrant:{document_id}:{page_number}")


@dataclass(frozen=True)
class QdrantClient:
    base_url: str
    api_key: str | None = None
    transport: httpx.BaseTransport | None = None

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            return {}
        return {"api-key": self.api_key}

    def _client(self, timeout: float) -> httpx.Client:
        return httpx.Client(timeout=timeout, transport=self.transport)

    def ensure_collection(self, *, name: str, vector_size: int, distance: str = "Cosine") -> None:
        base = self.base_url.rstrip("/")
        headers = self._headers()
        with self._client(30) as client:
            get_resp = client.get(f"{base}/collections/{name}", headers=headers)
            if get_resp.status_code == 200:
                return
            if get_resp.status_code != 404:
                get_resp.raise_for_status()
            create = client.put(
                f"{base}/collections/{name}",
                headers=headers,
                json={"vectors": {"size": vector_size, "distance": distance}},
            )
            create.raise_for_status()

    def upsert_points(self, *, collection: str, points: list[dict[str, Any]]) -> None:
        if not points:
            return
        base = self.base_url.rstrip("/")
        with self._client(120) as client:
            resp = client.put(
                f"{base}/collections/{collection}/points",
                params={"wait": "true"},
                headers=self._headers(),
                json={"points": points},
            )
            resp.raise_for_status()

    def delete_points_for_document(self, *, collection: str, document_id: UUID) -> None:
        base = self.base_url.rstrip("/")
        payload = {"filter": {"must": [{"key": "document_id", "match": {"value": str(document_id)}}]}}
        with self._client(60) as client:
            resp = client.post(
                f"{base}/collections/{collection}/points/delete",
                params={"wait": "true"},
                headers=self._headers(),
                json=payload,
            )
            if resp.status_code == 404:
                return
            resp.raise_for_status()

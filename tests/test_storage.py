from __future__ import annotations

import io
from typing import Any
from uuid import uuid4

import pytest
from botocore.exceptions import ClientError

from ol_doc_pipeline_core.models import FileVariant
from ol_doc_pipeline_core.storage import S3Config, S3DocumentStore


class FakeS3:
    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.content_types: dict[str, str] = {}
        self.head_error_code = "404"

    def put_object(self, *, Bucket: str, Key: str, Body: bytes, ContentType: str) -> None:  # noqa: N803
        self.objects[Key] = Body
        self.content_types[Key] = ContentType

    def get_object(self, *, Bucket: str, Key: str) -> dict[str, Any]:  # noqa: N803
        return {"Body": io.BytesIO(self.objects[Key])}

    def head_object(self, *, Bucket: str, Key: str) -> dict[str, Any]:  # noqa: N803
        if Key not in self.objects:
            raise ClientError({"Error": {"Code": self.head_error_code}}, "HeadObject")
        return {}

    def get_paginator(self, name: str) -> FakeS3:
        assert name == "list_objects_v2"
        return self

    def paginate(self, *, Bucket: str, Prefix: str) -> list[dict[str, Any]]:  # noqa: N803
        return [{"Contents": [{"Key": k} for k in sorted(self.objects) if k.startswith(Prefix)]}]

    def delete_objects(self, *, Bucket: str, Delete: dict[str, Any]) -> None:  # noqa: N803
        for obj in Delete["Objects"]:
            self.objects.pop(obj["Key"], None)


def _store(fake: FakeS3) -> S3DocumentStore:
    cfg = S3Config(
        endpoint="http://minio:9000",
        bucket="course-docs",
        access_key="a",
        secret_key="s",
        prefix="documents/",
    )
    return S3DocumentStore(cfg, client=fake)


def test_store_and_read_by_owner_document_and_variant() -> None:
    fake = FakeS3()
    store = _store(fake)
    doc_id = uuid4()

    uri = store.store_document(b"%PDF-orig", owner_id="u1", document_id=doc_id, variant=FileVariant.ORIGINAL)
    store.store_document(b"%PDF-lean", owner_id="u1", document_id=doc_id, variant=FileVariant.PROCESSED)

    assert uri == f"s3://course-docs/documents/u1/{doc_id}/original.pdf"
    assert fake.content_types[f"documents/u1/{doc_id}/original.pdf"] == "application/pdf"
    assert store.read_document(owner_id="u1", document_id=doc_id, variant=FileVariant.ORIGINAL) == b"%PDF-orig"
    assert store.read_document(owner_id="u1", document_id=doc_id, variant=FileVariant.PROCESSED) == b"%PDF-lean"


def test_document_exists() -> None:
    fake = FakeS3()
    store = _store(fake)
    doc_id = uuid4()
    store.store_document(b"x", owner_id="u1", document_id=doc_id, variant=FileVariant.ORIGINAL)

    assert store.document_exists(owner_id="u1", document_id=doc_id, variant=FileVariant.ORIGINAL) is True
    assert store.document_exists(owner_id="u1", document_id=doc_id, variant=FileVariant.PROCESSED) is False


def test_document_exists_propagates_unexpected_errors() -> None:
    fake = FakeS3()
    fake.head_error_code = "AccessDenied"
    store = _store(fake)

    with pytest.raises(ClientError):
        store.document_exists(owner_id="u1", document_id=uuid4(), variant=FileVariant.ORIGINAL)


def test_delete_document_removes_only_that_document() -> None:
    fake = FakeS3()
    store = _store(fake)
    doc_a, doc_b = uuid4(), uuid4()
    for variant in FileVariant:
        store.store_document(b"a", owner_id="u1", document_id=doc_a, variant=variant)
    store.store_document(b"b", owner_id="u1", document_id=doc_b, variant=FileVariant.ORIGINAL)

    assert store.delete_document(owner_id="u1", document_id=doc_a) == 2
    assert list(fake.objects) == [f"documents/u1/{doc_b}/original.pdf"]
    assert store.delete_document(owner_id="u1", document_id=doc_a) == 0

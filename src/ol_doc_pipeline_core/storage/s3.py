from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import UUID

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from ol_doc_pipeline_core.models import FileVariant

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


@dataclass(frozen=True)
class S3Config:
    endpoint: str
    bucket: str
    access_key: str
    secret_key: str
    region: str = "us-east-1"
    prefix: str = "documents"


class S3DocumentStore:
    """
    Original and processed PDFs, one object per (owner, document, variant):
    `{prefix}/{owner_id}/{document_id}/{variant}.pdf`.
    """

    def __init__(self, cfg: S3Config, *, client: Any | None = None):
        self._cfg = cfg
        self._client = client or boto3.client(
            "s3",
            endpoint_url=cfg.endpoint,
            aws_access_key_id=cfg.access_key,
            aws_secret_access_key=cfg.secret_key,
            region_name=cfg.region,
            config=Config(s3={"addressing_style": "path"}),
        )

    @property
    def bucket(self) -> str:
        return self._cfg.bucket

    def _document_prefix(self, owner_id: str, document_id: UUID) -> str:
        return f"{self._cfg.prefix.strip('/')}/{owner_id}/{document_id}/"

    def document_key(self, owner_id: str, document_id: UUID, variant: FileVariant) -> str:
        return f"{self._document_prefix(owner_id, document_id)}{FileVariant(variant).value}.pdf"

    def store_document(
        self,
        data: bytes,
        *,
        owner_id: str,
        document_id: UUID,
        variant: FileVariant,
    ) -> str:
        key = self.document_key(owner_id, document_id, variant)
        self._client.put_object(
            Bucket=self._cfg.bucket,
            Key=key,
            Body=data,
            ContentType="application/pdf",
        )
        return f"s3://{self._cfg.bucket}/{key}"

    def read_document(self, *, owner_id: str, document_id: UUID, variant: FileVariant) -> bytes:
        key = self.document_key(owner_id, document_id, variant)
        obj = self._client.get_object(Bucket=self._cfg.bucket, Key=key)
        return obj["Body"].read()

    def document_exists(self, *, owner_id: str, document_id: UUID, variant: FileVariant) -> bool:
        key = self.document_key(owner_id, document_id, variant)
        try:
            self._client.head_object(Bucket=self._cfg.bucket, Key=key)
            return True
        except ClientError as e:
            code = (e.response or {}).get("Error", {}).get("Code")
            if code in _MISSING_CODES:
                return False
            raise

    def delete_document(self, *, owner_id: str, document_id: UUID) -> int:
        """
        Delete every stored variant of a document. Returns number of keys attempted.
        """
        paginator = self._client.get_paginator("list_objects_v2")
        keys: list[str] = []
        for page in paginator.paginate(
            Bucket=self._cfg.bucket, Prefix=self._document_prefix(owner_id, document_id)
        ):
            for obj in page.get("Contents") or []:
                k = obj.get("Key")
                if isinstance(k, str) and k:
                    keys.append(k)
        if not keys:
            return 0
        self._client.delete_objects(
            Bucket=self._cfg.bucket,
            Delete={"Objects": [{"Key": k} for k in keys], "Quiet": True},
        )
        return len(keys)

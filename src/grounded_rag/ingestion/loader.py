"""Document stores — where raw documents are listed and read from."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


class DocumentStore(ABC):
    """Read-only view over a collection of text documents keyed by string."""

    @abstractmethod
    def list_keys(self) -> list[str]:
        """Return every document key, in a stable order."""
        ...

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the document text, or ``None`` when *key* does not exist."""
        ...


class LocalDirectoryStore(DocumentStore):
    """Documents are files below *root*; keys are POSIX paths relative to it.

    Parameters
    ----------
    root:
        Directory containing source documents.
    glob:
        File-matching pattern, applied recursively.
    """

    def __init__(self, root: str | Path, glob: str = "**/*") -> None:
        self.root = Path(root)
        self.glob = glob

    def list_keys(self) -> list[str]:
        if not self.root.is_dir():
            logger.warning("Document directory %s does not exist", self.root)
            return []
        return sorted(
            p.relative_to(self.root).as_posix() for p in self.root.glob(self.glob) if p.is_file()
        )

    def get(self, key: str) -> str | None:
        path = self.root / key
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8", errors="replace")


class S3DocumentStore(DocumentStore):
    """Documents are objects in an S3-compatible bucket (AWS, R2, MinIO).

    Parameters
    ----------
    bucket:
        Bucket name.
    prefix:
        Only keys starting with this prefix are listed.
    endpoint_url:
        Custom endpoint for S3-compatible services; ``None`` means AWS.
    region:
        Region name passed to the boto3 client.
    """

    def __init__(
        self,
        bucket: str,
        *,
        prefix: str = "",
        endpoint_url: str | None = None,
        region: str = "auto",
    ) -> None:
        self._bucket = bucket
        self._prefix = prefix
        self._s3_client = boto3.client("s3", region_name=region, endpoint_url=endpoint_url or None)

    def list_keys(self) -> list[str]:
        keys: list[str] = []
        paginator = self._s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=self._bucket, Prefix=self._prefix):
            for obj in page.get("Contents", []):
                keys.append(obj["Key"])
        return keys

    def get(self, key: str) -> str | None:
        try:
            response = self._s3_client.get_object(Bucket=self._bucket, Key=key)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in ("404", "NoSuchKey"):
                return None
            raise
        return response["Body"].read().decode("utf-8", errors="replace")


def iter_documents(store: DocumentStore) -> Iterator[tuple[str, str]]:
    """Lazily yield ``(key, text)`` for every document in *store*.

    Keys that vanish between listing and reading are skipped.
    """
    for key in store.list_keys():
        text = store.get(key)
        if text is None:
            logger.warning("Document %s disappeared before it could be read; skipping", key)
            continue
        yield key, text

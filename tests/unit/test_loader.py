"""Unit tests for the document stores."""

from __future__ import annotations

import io
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from grounded_rag.ingestion.loader import (
    DocumentStore,
    LocalDirectoryStore,
    S3DocumentStore,
    iter_documents,
)


class _DictStore(DocumentStore):
    """Lists keys that may no longer exist by the time they are read."""

    def __init__(self, listed: list[str], contents: dict[str, str]) -> None:
        self._listed = listed
        self._contents = contents

    def list_keys(self) -> list[str]:
        return list(self._listed)

    def get(self, key: str) -> str | None:
        return self._contents.get(key)


# ── LocalDirectoryStore ─────────────────────────────────────────────────


class TestLocalDirectoryStore:
    def test_lists_files_recursively_as_posix_keys(self, tmp_path: Path) -> None:
        (tmp_path / "b.txt").write_text("B")
        (tmp_path / "nested").mkdir()
        (tmp_path / "nested" / "a.md").write_text("A")

        store = LocalDirectoryStore(tmp_path)

        assert store.list_keys() == ["b.txt", "nested/a.md"]

    def test_glob_filters_keys(self, tmp_path: Path) -> None:
        (tmp_path / "keep.md").write_text("x")
        (tmp_path / "skip.txt").write_text("y")
        assert LocalDirectoryStore(tmp_path, glob="**/*.md").list_keys() == ["keep.md"]

    def test_get_reads_utf8(self, tmp_path: Path) -> None:
        (tmp_path / "zh.txt").write_text("你好。", encoding="utf-8")
        assert LocalDirectoryStore(tmp_path).get("zh.txt") == "你好。"

    def test_get_missing_returns_none(self, tmp_path: Path) -> None:
        assert LocalDirectoryStore(tmp_path).get("nope.txt") is None

    def test_missing_directory_lists_nothing(self, tmp_path: Path) -> None:
        assert LocalDirectoryStore(tmp_path / "absent").list_keys() == []


# ── S3DocumentStore ─────────────────────────────────────────────────────


@pytest.fixture()
def s3_client() -> MagicMock:
    client = MagicMock()
    paginator = MagicMock()
    paginator.paginate.return_value = [
        {"Contents": [{"Key": "docs/a.txt"}, {"Key": "docs/b.txt"}]},
        {"Contents": [{"Key": "docs/c.txt"}]},
        {},
    ]
    client.get_paginator.return_value = paginator
    return client


class TestS3DocumentStore:
    def test_client_uses_custom_endpoint(self, s3_client: MagicMock) -> None:
        with patch("grounded_rag.ingestion.loader.boto3") as boto3:
            boto3.client.return_value = s3_client
            S3DocumentStore("bucket", endpoint_url="https://r2.example.com", region="auto")

        boto3.client.assert_called_once_with(
            "s3", region_name="auto", endpoint_url="https://r2.example.com"
        )

    def test_list_keys_walks_every_page(self, s3_client: MagicMock) -> None:
        with patch("grounded_rag.ingestion.loader.boto3") as boto3:
            boto3.client.return_value = s3_client
            store = S3DocumentStore("bucket", prefix="docs/")

        assert store.list_keys() == ["docs/a.txt", "docs/b.txt", "docs/c.txt"]
        s3_client.get_paginator.assert_called_once_with("list_objects_v2")
        s3_client.get_paginator.return_value.paginate.assert_called_once_with(
            Bucket="bucket", Prefix="docs/"
        )

    def test_get_decodes_body(self, s3_client: MagicMock) -> None:
        s3_client.get_object.return_value = {"Body": io.BytesIO("第一句。".encode("utf-8"))}
        with patch("grounded_rag.ingestion.loader.boto3") as boto3:
            boto3.client.return_value = s3_client
            store = S3DocumentStore("bucket")

        assert store.get("docs/a.txt") == "第一句。"
        s3_client.get_object.assert_called_once_with(Bucket="bucket", Key="docs/a.txt")

    def test_get_missing_key_returns_none(self, s3_client: MagicMock) -> None:
        s3_client.get_object.side_effect = ClientError(
            {"Error": {"Code": "NoSuchKey", "Message": "gone"}}, "GetObject"
        )
        with patch("grounded_rag.ingestion.loader.boto3") as boto3:
            boto3.client.return_value = s3_client
            store = S3DocumentStore("bucket")

        assert store.get("docs/gone.txt") is None

    def test_get_other_errors_propagate(self, s3_client: MagicMock) -> None:
        s3_client.get_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "no"}}, "GetObject"
        )
        with patch("grounded_rag.ingestion.loader.boto3") as boto3:
            boto3.client.return_value = s3_client
            store = S3DocumentStore("bucket")

        with pytest.raises(ClientError):
            store.get("docs/a.txt")


# ── iter_documents ──────────────────────────────────────────────────────


class TestIterDocuments:
    def test_yields_key_text_pairs_in_listing_order(self) -> None:
        store = _DictStore(["b", "a"], {"a": "A.", "b": "B."})
        assert list(iter_documents(store)) == [("b", "B."), ("a", "A.")]

    def test_skips_keys_that_vanished(self) -> None:
        store = _DictStore(["a", "gone", "c"], {"a": "A.", "c": "C."})
        assert [k for k, _ in iter_documents(store)] == ["a", "c"]

    def test_is_lazy(self) -> None:
        store = MagicMock(spec=DocumentStore)
        store.list_keys.return_value = ["a", "b"]
        store.get.return_value = "text"

        documents = iter_documents(store)
        store.get.assert_not_called()
        next(documents)
        store.get.assert_called_once_with("a")

from __future__ import annotations

import hashlib
import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol

import boto3
import httpx

from medreport.core.config import Settings, settings as default_settings


class ReportStorageError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ReportStorage(Protocol):
    def upload(self, content: bytes, filename: str) -> str:
        """Store *content* and return its content identifier."""
        ...


def content_digest(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()


class LocalReportStorage:
    def __init__(self, root: Path) -> None:
        self._root = root

    def upload(self, content: bytes, filename: str) -> str:
        content_id = content_digest(content)
        path = self._root / content_id / Path(filename).name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return content_id


class BucketReportStorage:
    def __init__(self, bucket: str, prefix: str | None, *, client: Any | None = None) -> None:
        self._bucket = bucket
        self._prefix = prefix.strip("/") if prefix else None
        self._client = client or boto3.client("s3", endpoint_url=os.getenv("AWS_ENDPOINT_URL"))

    def upload(self, content: bytes, filename: str) -> str:
        content_id = content_digest(content)
        self._client.put_object(
            Bucket=self._bucket,
            Key=self._build_key(f"{content_id}/{Path(filename).name}"),
            Body=content,
            ContentType="application/pdf",
            Metadata={"sha256": content_id},
        )
        return content_id

    def _build_key(self, key: str) -> str:
        if not self._prefix:
            return key
        return f"{self._prefix}/{key}"


class PinataReportStorage:
    """Pins the document to IPFS through the Pinata pinning API."""

    def __init__(
        self,
        jwt: str,
        *,
        api_url: str,
        timeout_seconds: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        if not jwt:
            raise ReportStorageError("Pinata JWT is missing")
        self._jwt = jwt
        self._api_url = api_url
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout_seconds))

    def __enter__(self) -> PinataReportStorage:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def upload(self, content: bytes, filename: str) -> str:
        headers = {"Authorization": f"Bearer {self._jwt}"}
        files = {"file": (filename, content, "application/pdf")}
        data = {"pinataMetadata": json.dumps({"name": filename})}
        try:
            response = self._client.post(self._api_url, headers=headers, files=files, data=data)
        except httpx.HTTPError as exc:
            raise ReportStorageError(f"Pinata request failed: {exc}") from exc

        if response.status_code != 200:
            raise ReportStorageError(
                f"Pinata upload rejected with status {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        try:
            content_id = response.json()["IpfsHash"]
        except (ValueError, KeyError, TypeError) as exc:
            raise ReportStorageError("Pinata response has no IpfsHash", status_code=response.status_code) from exc
        if not content_id:
            raise ReportStorageError("Pinata returned an empty IpfsHash", status_code=response.status_code)
        return str(content_id)


def build_report_storage(config: Settings | None = None) -> ReportStorage:
    config = config or default_settings
    backend = (config.storage_backend or "local").lower()
    logger = logging.getLogger(__name__)

    if backend == "pinata":
        return PinataReportStorage(
            config.pinata_jwt or "",
            api_url=config.pinata_api_url,
            timeout_seconds=config.upload_timeout_seconds,
        )
    if backend == "bucket":
        if not config.storage_bucket:
            raise ReportStorageError("storage_bucket is required for the bucket backend")
        return BucketReportStorage(config.storage_bucket, config.storage_prefix)
    if backend != "local":
        logger.warning("report_storage_backend_unknown", extra={"backend": backend, "fallback": "local"})
    return LocalReportStorage(Path(config.storage_root))

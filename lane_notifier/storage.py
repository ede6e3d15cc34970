"""Upload of exported Lane artifacts to S3-compatible object storage.

This module handles:
- Creating the S3 client from settings (credentials checked lazily)
- Enumerating the top-level files of the export directory
- Uploading each file independently under `<digest>/<filename>`
- Aggregating per-file outcomes into an UploadSummary

One file failing never aborts the others; the caller decides what the
counts mean for the overall pipeline outcome.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import TYPE_CHECKING, Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from lane_notifier.config import ACCESS_KEY_ENV_VARS, SECRET_KEY_ENV_VARS
from lane_notifier.errors import (
    MissingCredentialsError,
    MissingDirectoryError,
    StorageConfigurationError,
    TransferFailureError,
)
from lane_notifier.types import UploadSummary

if TYPE_CHECKING:
    from lane_notifier.config import Settings

logger = logging.getLogger(__name__)

# Files above this size would use multipart upload on most S3 clients
MULTIPART_THRESHOLD = 5 * 1024 * 1024  # 5 MiB


def create_s3_client(settings: Settings) -> Any:
    """Create an S3 client for the configured object store.

    Args:
        settings: Application settings.

    Returns:
        boto3 S3 client.

    Raises:
        MissingCredentialsError: If the access key or secret is not set.
        StorageConfigurationError: If boto3 rejects the endpoint or region.
    """
    if not settings.storage_access_key:
        raise MissingCredentialsError(ACCESS_KEY_ENV_VARS)
    secret = settings.storage_secret_key
    if secret is None or not secret.get_secret_value():
        raise MissingCredentialsError(SECRET_KEY_ENV_VARS)

    try:
        return boto3.client(
            "s3",
            endpoint_url=settings.storage_endpoint,
            region_name=settings.storage_region,
            aws_access_key_id=settings.storage_access_key,
            aws_secret_access_key=secret.get_secret_value(),
        )
    except (ValueError, BotoCoreError) as e:
        raise StorageConfigurationError(settings.storage_endpoint, str(e)) from e


def object_key(prefix: str, filename: str) -> str:
    """Build the object key for an uploaded file."""
    return f"{prefix}/{filename}"


def list_export_files(local_dir: Path) -> list[Path]:
    """List the regular files directly inside a directory.

    Subdirectories and their contents are ignored.

    Args:
        local_dir: Directory to enumerate.

    Returns:
        Files sorted by name.

    Raises:
        MissingDirectoryError: If local_dir does not exist.
    """
    if not local_dir.is_dir():
        raise MissingDirectoryError(local_dir)
    return sorted(p for p in local_dir.iterdir() if p.is_file())


class ArtifactUploader:
    """Uploads an export directory to the artifact bucket.

    The S3 client is created on first use so that missing credentials only
    matter once an upload is actually attempted.
    """

    def __init__(
        self,
        settings: Settings,
        client: Any | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.settings = settings
        self.bucket = settings.storage_bucket
        self.max_workers = max_workers or settings.upload_workers
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = create_s3_client(self.settings)
        return self._client

    def upload_one(self, path: Path, key: str) -> None:
        """Upload a single file.

        Args:
            path: Local file.
            key: Destination object key.

        Raises:
            TransferFailureError: If the file could not be read or stored.
        """
        filename = path.name
        try:
            size = path.stat().st_size
            logger.info("Uploading file: %s (size: %d bytes)", path, size)
            if size > MULTIPART_THRESHOLD:
                logger.info("Large file, above multipart threshold: %s", path)
            content = path.read_bytes()
        except OSError as e:
            raise TransferFailureError(filename, f"failed to read file: {e}") from e

        try:
            response = self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=content,
            )
        except (BotoCoreError, ClientError) as e:
            raise TransferFailureError(
                filename, f"failed to upload to s3://{self.bucket}/{key}: {e}"
            ) from e
        except Exception as e:
            logger.exception("Unexpected error uploading %s", filename)
            raise TransferFailureError(filename, f"unexpected error: {e}") from e

        status_code = response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        if status_code is None or not 200 <= status_code < 300:
            raise TransferFailureError(
                filename,
                "unexpected response",
                status_code=status_code,
            )

    def upload_all(self, local_dir: Path, prefix: str) -> UploadSummary:
        """Upload every top-level file of a directory under a prefix.

        Args:
            local_dir: Export directory.
            prefix: Key prefix (the image digest).

        Returns:
            UploadSummary with success and failure counts.

        Raises:
            MissingDirectoryError: If local_dir does not exist.
            MissingCredentialsError: If storage credentials are not set, even
                when the directory is empty.
            StorageConfigurationError: If the S3 client cannot be created.
        """
        files = list_export_files(local_dir)
        summary = UploadSummary(prefix=prefix)

        # Resolve the client before fanning out so a credentials problem is
        # reported once, as a stage error
        _ = self.client

        if not files:
            logger.warning("No files to upload in %s", local_dir)
            return summary

        workers = min(self.max_workers, len(files))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {}
            for path in files:
                key = object_key(prefix, path.name)
                logger.info(
                    "Uploading %s to s3://%s/%s", path.name, self.bucket, key
                )
                futures[executor.submit(self.upload_one, path, key)] = path

            for future in as_completed(futures):
                path = futures[future]
                try:
                    future.result()
                except TransferFailureError as e:
                    logger.warning("%s", e)
                    summary.record_failure(path.name)
                else:
                    logger.info("Successfully uploaded %s", path.name)
                    summary.record_success()

        logger.info(
            "Upload complete! Successfully uploaded: %d files to s3://%s/%s",
            summary.uploaded,
            self.bucket,
            prefix,
        )
        if summary.failed:
            logger.warning(
                "Failed to upload: %d files (%s)",
                summary.failed,
                ", ".join(sorted(summary.failed_files)),
            )
        return summary


__all__ = [
    "MULTIPART_THRESHOLD",
    "ArtifactUploader",
    "create_s3_client",
    "list_export_files",
    "object_key",
]

"""S3 backed implementation of the object store gateway."""

from typing import TYPE_CHECKING, Any, List, Optional

from .error_handling import retry_s3_operation, with_error_handling
from .image_utils import content_type_for_key
from .logging_config import get_logger
from .models import StoredObject

if TYPE_CHECKING:
    from mypy_boto3_s3.client import S3Client
else:
    S3Client = Any


class S3ObjectStoreGateway:
    """Lists, downloads and uploads objects through a boto3 S3 client."""

    def __init__(self, s3_client: S3Client, max_attempts: int = 1):
        self._s3_client = s3_client
        self._max_attempts = max_attempts
        self._logger = get_logger("s3-watermark.gateway")

    def _call(self, func, *args):
        wrapped = retry_s3_operation(max_attempts=self._max_attempts)(
            with_error_handling(func)
        )
        return wrapped(*args)

    def list_objects(self, bucket: str, prefix: str) -> List[StoredObject]:
        """List every object under ``prefix``, following all result pages."""
        return self._call(self._list_objects, bucket, prefix)

    def get_object(self, bucket: str, key: str) -> bytes:
        return self._call(self._get_object, bucket, key)

    def put_object(
        self, bucket: str, key: str, body: bytes, content_type: Optional[str] = None
    ) -> None:
        """Store ``body``; the content type defaults to one derived from ``key``."""
        self._call(self._put_object, bucket, key, body, content_type)

    def put_file(self, bucket: str, key: str, path: str) -> None:
        self._call(self._put_file, bucket, key, path)

    def _list_objects(self, bucket: str, prefix: str) -> List[StoredObject]:
        self._logger.debug(f"Listing objects in s3://{bucket}/{prefix}")
        objects = []
        paginator = self._s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
            for obj in page.get("Contents", []):
                objects.append(StoredObject(key=obj["Key"], size=obj.get("Size", 0)))
        self._logger.info(f"Found {len(objects)} objects in s3://{bucket}/{prefix}")
        return objects

    def _get_object(self, bucket: str, key: str) -> bytes:
        self._logger.debug(f"Downloading s3://{bucket}/{key}")
        response = self._s3_client.get_object(Bucket=bucket, Key=key)
        body = response["Body"]
        try:
            return body.read()
        finally:
            body.close()

    def _put_object(
        self, bucket: str, key: str, body: bytes, content_type: Optional[str]
    ) -> None:
        self._logger.debug(f"Uploading {len(body)} bytes to s3://{bucket}/{key}")
        self._s3_client.put_object(
            Bucket=bucket,
            Key=key,
            Body=body,
            ContentType=content_type or content_type_for_key(key),
        )

    def _put_file(self, bucket: str, key: str, path: str) -> None:
        self._logger.debug(f"Uploading {path} to s3://{bucket}/{key}")
        with open(path, "rb") as handle:
            self._s3_client.put_object(
                Bucket=bucket,
                Key=key,
                Body=handle,
                ContentType=content_type_for_key(key),
            )

"""S3 implementation of the object store."""

from typing import Any, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError

from storage_deploy.utils.errors import ErrorContext, error_handler
from storage_deploy.utils.logging import get_logger

from .base import ListPage, ObjectStore, StorageEntry

logger = get_logger(__name__)


class S3ObjectStore(ObjectStore):
    """Object store backed by a bucket on any S3-compatible service."""

    def __init__(self, s3_client, bucket: str, page_size: Optional[int] = None):
        """Initialize S3 object store.

        Args:
            s3_client: Boto3 S3 client
            bucket: Bucket that plays the role of the container
            page_size: Optional MaxKeys for listing calls
        """
        self.s3_client = s3_client
        self.bucket = bucket
        self.page_size = page_size

    def put(self, path: str, body: bytes, content_type: str) -> None:
        try:
            self.s3_client.put_object(
                Bucket=self.bucket,
                Key=path,
                Body=body,
                ContentType=content_type
            )
        except (ClientError, BotoCoreError) as e:
            raise self._wrap(e, 'put_object', path) from e

    def delete(self, path: str) -> None:
        try:
            self.s3_client.delete_object(Bucket=self.bucket, Key=path)
        except (ClientError, BotoCoreError) as e:
            raise self._wrap(e, 'delete_object', path) from e

    def list_page(self, prefix: str, token: Optional[str] = None) -> ListPage:
        params: Dict[str, Any] = {'Bucket': self.bucket, 'Prefix': prefix}
        if token:
            params['ContinuationToken'] = token
        if self.page_size:
            params['MaxKeys'] = self.page_size

        try:
            response = self.s3_client.list_objects_v2(**params)
        except (ClientError, BotoCoreError) as e:
            raise self._wrap(e, 'list_objects_v2', prefix) from e

        entries = [
            StorageEntry(name=obj['Key'], content_length=int(obj.get('Size', 0)))
            for obj in response.get('Contents', [])
        ]
        next_token = response.get('NextContinuationToken') if response.get('IsTruncated') else None

        return ListPage(entries=entries, next_token=next_token)

    def _wrap(self, error: Exception, operation: str, key: str):
        return error_handler.handle_exception(
            error,
            ErrorContext(object_key=key, container=self.bucket, operation=operation)
        )

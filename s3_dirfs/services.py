from __future__ import annotations
"""Object store client used by the filesystem view."""
import logging
from typing import Callable, Iterator, Optional, Protocol

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from .errors import NotFoundError, TransportError
from .models import ListedObject, ObjectContent, ObjectDetails, ObjectPage

LOGGER = logging.getLogger(__name__)

PAGE_SIZE = 1000
NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


class ObjectStoreClient(Protocol):
    """The three store operations the filesystem view relies on."""

    def head_object(self, bucket: str, key: str) -> ObjectDetails:
        ...

    def get_object(self, bucket: str, key: str) -> ObjectContent:
        ...

    def list_objects(
        self,
        bucket: str,
        prefix: str = "",
        delimiter: str | None = "/",
        page_token: str | None = None,
    ) -> ObjectPage:
        ...


class S3ObjectStoreClient:
    """Encapsulates boto3 calls and maps their failures onto filesystem errors."""

    def __init__(
        self,
        *,
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        region_name: str | None = None,
        page_size: int = PAGE_SIZE,
        client_factory: Callable[..., object] | None = None,
    ):
        self._client_factory = client_factory or boto3.client
        self._page_size = max(1, min(int(page_size), PAGE_SIZE))
        self._client = self._create_client(endpoint_url, access_key, secret_key, region_name)

    def _create_client(
        self,
        endpoint_url: str | None,
        access_key: str | None,
        secret_key: str | None,
        region_name: str | None,
    ):
        config = Config(signature_version="s3v4")
        params: dict[str, object] = {"config": config}
        if endpoint_url:
            params["endpoint_url"] = endpoint_url
        if access_key:
            params["aws_access_key_id"] = access_key
        if secret_key:
            params["aws_secret_access_key"] = secret_key
        if region_name:
            params["region_name"] = region_name
        return self._client_factory("s3", **params)

    def list_objects(
        self,
        bucket: str,
        prefix: str = "",
        delimiter: str | None = "/",
        page_token: str | None = None,
    ) -> ObjectPage:
        """Return a single page of a listing.

        Raises:
            TransportError: when the listing call fails for any reason.
        """

        list_params: dict[str, object] = {"Bucket": bucket, "MaxKeys": self._page_size}
        if prefix:
            list_params["Prefix"] = prefix
        if delimiter:
            list_params["Delimiter"] = delimiter
        if page_token:
            list_params["ContinuationToken"] = page_token

        try:
            response = self._client.list_objects_v2(**list_params)
        except (ClientError, BotoCoreError) as exc:
            raise TransportError(f"could not list s3 objects: {exc}") from exc

        objects = [
            ListedObject(
                key=obj["Key"],
                size=obj.get("Size") or 0,
                last_modified=obj.get("LastModified"),
            )
            for obj in response.get("Contents", [])
        ]
        prefixes = [common["Prefix"] for common in response.get("CommonPrefixes", [])]
        next_token: Optional[str] = None
        if response.get("IsTruncated", False):
            next_token = response.get("NextContinuationToken")

        LOGGER.debug(
            "Listed s3://%s/%s (%d objects, %d prefixes, more=%s)",
            bucket,
            prefix,
            len(objects),
            len(prefixes),
            next_token is not None,
        )
        return ObjectPage(objects=objects, prefixes=prefixes, next_token=next_token)

    def head_object(self, bucket: str, key: str) -> ObjectDetails:
        """Fetch metadata about a single object."""

        try:
            response = self._client.head_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise _translate_error(exc, bucket, key, "could not head s3 object") from exc
        return _details_from_response(bucket, key, response)

    def get_object(self, bucket: str, key: str) -> ObjectContent:
        """Open the body of a single object."""

        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise _translate_error(exc, bucket, key, "error getting s3 object") from exc
        return ObjectContent(details=_details_from_response(bucket, key, response), body=response["Body"])


def _details_from_response(bucket: str, key: str, response: dict) -> ObjectDetails:
    return ObjectDetails(
        bucket=bucket,
        key=key,
        size=response.get("ContentLength") or 0,
        last_modified=response.get("LastModified"),
    )


def _translate_error(exc: Exception, bucket: str, key: str, message: str) -> Exception:
    if isinstance(exc, ClientError):
        code = str(exc.response.get("Error", {}).get("Code", ""))
        if code in NOT_FOUND_CODES:
            return NotFoundError(key)
    LOGGER.debug("Store call failed for s3://%s/%s: %s", bucket, key, exc)
    return TransportError(f"{message}: {exc}")


def iter_pages(
    client: ObjectStoreClient,
    bucket: str,
    prefix: str,
    delimiter: str | None = "/",
) -> Iterator[ObjectPage]:
    """Yield every page of a listing, following continuation tokens."""

    token: str | None = None
    number = 1
    while True:
        page = client.list_objects(bucket, prefix=prefix, delimiter=delimiter, page_token=token)
        page.number = number
        yield page
        if not page.next_token:
            return
        token = page.next_token
        number += 1

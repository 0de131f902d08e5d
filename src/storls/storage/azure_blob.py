"""Azure Blob Storage handle"""
import functools
import typing as t
from urllib.parse import urlparse
import requests
import urllib3.exceptions
import azure.core.exceptions as ace
from azure.identity import DefaultAzureCredential
from azure.storage.blob import BlobServiceClient, ContainerClient, BlobPrefix
import zirconium as zr
from autoinject import injector
from .base import (
    UrlBaseHandle, StorageEntry, ListingItem, StorageError, PathNotFoundError, InsufficientPermissionError,
    RootResolutionError
)

BLOB_DOMAIN_SUFFIX = ".blob.core.windows.net"


def azure_error_to_storage_error(ex: ace.AzureError, location: str) -> StorageError:
    """Convert an Azure SDK error into the matching StorageError."""
    if isinstance(ex, ace.ResourceNotFoundError):
        return PathNotFoundError(location)
    elif isinstance(ex, ace.ClientAuthenticationError):
        return InsufficientPermissionError(location)
    elif isinstance(ex, ace.HttpResponseError) and ex.status_code == 403:
        return InsufficientPermissionError(location)
    elif isinstance(ex, ace.HttpResponseError) and ex.status_code == 404:
        return PathNotFoundError(location)
    if ex.inner_exception is not None:
        if isinstance(ex.inner_exception, urllib3.exceptions.ConnectTimeoutError):
            return StorageError(f"Azure: Connection timeout error: {ex.__class__.__name__}: {str(ex)}", 2001, True, location)
        elif isinstance(ex.inner_exception, requests.ConnectionError):
            return StorageError(f"Azure: Connection error: {ex.__class__.__name__}: {str(ex)}", 2002, True, location)
    return StorageError(f"Azure: {ex.__class__.__name__}: {str(ex)}", 2000, location=location)


def wrap_azure_errors(cb):

    @functools.wraps(cb)
    def _inner(self, *args, **kwargs):
        try:
            return cb(self, *args, **kwargs)
        except ace.AzureError as ex:
            raise azure_error_to_storage_error(ex, self.path()) from ex

    return _inner


class AzureBlobHandle(UrlBaseHandle):
    """Handle for an account, container or virtual directory in Azure Blob Storage.

        Entry paths take the form /CONTAINER/BLOB_NAME. The account itself is the
        root path "/" and lists its containers as folders. Following the URL
        convention, a location ending in "/" is a directory; one without is a blob
        if such a blob exists and a virtual directory if any blob lives below it.
    """

    config: zr.ApplicationConfig = None

    @injector.construct
    def __init__(self, url, *args, **kwargs):
        super().__init__(url, *args, **kwargs)

    def get_connection_details(self) -> dict:
        return self._with_cache("connection_details", self._get_connection_details)

    def _get_connection_details(self) -> dict:
        url_parts = self.parse_url()
        domain = url_parts.hostname or ""
        if not domain.endswith(BLOB_DOMAIN_SUFFIX):
            raise RootResolutionError(self._url, "Invalid hostname")
        storage_account = domain[:-len(BLOB_DOMAIN_SUFFIX)]
        path_parts = url_parts.path.lstrip('/').split('/', 1)
        return {
            "storage_account": storage_account,
            "account_url": f"https://{domain}",
            "container_name": path_parts[0],
            "connection_string": self.config.as_str(("azure", "storage", storage_account, "connection_string"), default=None),
            "blob_name": path_parts[1] if len(path_parts) > 1 else ""
        }

    def service_client(self) -> BlobServiceClient:
        try:
            connection_info = self.get_connection_details()
            if connection_info["connection_string"]:
                return BlobServiceClient.from_connection_string(connection_info["connection_string"])
            return BlobServiceClient(account_url=connection_info["account_url"], credential=DefaultAzureCredential())
        except ValueError as ex:
            raise RootResolutionError(self._url, "Could not create blob service client") from ex

    def container_client(self, container_name: t.Optional[str] = None) -> ContainerClient:
        return self.service_client().get_container_client(container_name or self.get_connection_details()["container_name"])

    def _container_path(self, name: str = "") -> str:
        return f"/{self.get_connection_details()['container_name']}/{name}"

    @wrap_azure_errors
    def _resolve_root(self) -> StorageEntry:
        details = self.get_connection_details()
        if not details["container_name"]:
            return StorageEntry("/", True)
        blob_name = details["blob_name"]
        if not blob_name:
            properties = self.container_client().get_container_properties()
            return StorageEntry(self._container_path(), True, 0, properties.last_modified)
        if blob_name.endswith("/"):
            return StorageEntry(self._container_path(blob_name), True)
        blob_client = self.container_client().get_blob_client(blob_name)
        if blob_client.exists():
            properties = blob_client.get_blob_properties()
            return StorageEntry(self._container_path(blob_name), False, properties.size, properties.last_modified)
        for _ in self.container_client().list_blobs(name_starts_with=f"{blob_name}/", results_per_page=1):
            return StorageEntry(self._container_path(blob_name), True)
        raise RootResolutionError(self._url, "Location not found")

    def _list(self, recursive: bool, include_incomplete: bool) -> t.Iterable[ListingItem]:
        root = self.resolve_root()
        if not root.is_dir:
            yield ListingItem.ok(root)
            return
        include = ['uncommittedblobs'] if include_incomplete else None
        if root.path == "/":
            yield from self._list_account(recursive, include)
        else:
            prefix = self.get_connection_details()["blob_name"]
            if prefix and not prefix.endswith("/"):
                prefix += "/"
            yield from self._list_container(
                self.get_connection_details()["container_name"],
                prefix,
                recursive,
                include
            )

    def _failed(self, ex: ace.AzureError, location: str) -> ListingItem:
        self._log.debug(f"Unable to list [{location}]: {ex}")
        return ListingItem.failed(azure_error_to_storage_error(ex, location))

    def _list_account(self, recursive: bool, include: t.Optional[list]) -> t.Iterable[ListingItem]:
        try:
            for container in self.service_client().list_containers():
                if recursive:
                    yield from self._list_container(container.name, "", True, include)
                else:
                    yield ListingItem.ok(StorageEntry(f"/{container.name}/", True, 0, container.last_modified))
        except ace.AzureError as ex:
            yield self._failed(ex, self.path())

    def _list_container(self, container_name: str, prefix: str, recursive: bool, include: t.Optional[list]) -> t.Iterable[ListingItem]:
        """List one container; an error ends this container's listing as a single failed item."""
        try:
            client = self.container_client(container_name)
            if recursive:
                blobs = client.list_blobs(name_starts_with=prefix or None, include=include)
            else:
                blobs = client.walk_blobs(name_starts_with=prefix or None, include=include, delimiter="/")
            for blob in blobs:
                if isinstance(blob, BlobPrefix):
                    yield ListingItem.ok(StorageEntry(f"/{container_name}/{blob.name}", True))
                else:
                    yield ListingItem.ok(StorageEntry(f"/{container_name}/{blob.name}", False, blob.size or 0, blob.last_modified))
        except ace.AzureError as ex:
            yield self._failed(ex, f"/{container_name}/{prefix}")

    @staticmethod
    def supports(file_path: str) -> bool:
        if not (file_path.startswith("http://") or file_path.startswith("https://")):
            return False
        hostname = urlparse(file_path).hostname
        return hostname is not None and hostname.endswith(BLOB_DOMAIN_SUFFIX)

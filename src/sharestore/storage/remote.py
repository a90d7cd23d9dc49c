"""Boundary with the Azure file share SDK.

    Every method takes a path relative to the share root and raises only classified
    storage errors. Directory and file clients are built per call and never cached.
"""
import typing as t

import azure.core.exceptions as ace
import zrlog
from azure.storage.fileshare import ShareClient, ShareDirectoryClient, ShareFileClient, \
    FileProperties, DirectoryProperties, ContentSettings

from sharestore.util import ShareStoreError
from .entity import FileRecord, DirectoryRecord
from .errors import wrap_azure_errors, RESOURCE_ALREADY_EXISTS


class ShareRemote:
    """Wraps an Azure ShareClient for the operations used by the storage."""

    def __init__(self, share_client: ShareClient):
        self._share = share_client
        self._log = zrlog.get_logger("sharestore.remote")

    @property
    def share_name(self) -> str:
        return self._share.share_name

    def directory_client(self, path: str) -> ShareDirectoryClient:
        return self._share.get_directory_client(path)

    def file_client(self, path: str) -> ShareFileClient:
        return self._share.get_file_client(path)

    @wrap_azure_errors
    def get_directory_properties(self, path: str) -> DirectoryProperties:
        return self.directory_client(path).get_directory_properties()

    @wrap_azure_errors
    def create_directory(self, path: str, metadata: t.Optional[dict[str, str]] = None):
        """Create a directory, succeeding if it already exists."""
        if not path:
            # The share root always exists
            return
        try:
            self.directory_client(path).create_directory(metadata=metadata or {})
        except ace.ResourceExistsError as ex:
            if getattr(ex, "error_code", None) != RESOURCE_ALREADY_EXISTS:
                raise ex
            self._log.debug(f"Directory [{path}] already exists")

    @wrap_azure_errors
    def delete_directory(self, path: str):
        self.directory_client(path).delete_directory()

    @wrap_azure_errors
    def get_file_properties(self, path: str) -> FileProperties:
        return self.file_client(path).get_file_properties()

    @wrap_azure_errors
    def list_directory(self, path: str) -> t.Iterable[t.Union[FileRecord, DirectoryRecord]]:
        """List the direct children of a directory, with names relative to the share root."""
        prefix = path.strip("/")
        for item in self.directory_client(path).list_directories_and_files():
            if isinstance(item, FileProperties):
                yield FileRecord(self._join(prefix, item.name), item.size or 0)
            elif isinstance(item, DirectoryProperties):
                yield DirectoryRecord(self._join(prefix, item.name))
            else:
                raise ShareStoreError(f"Unknown type of file listing results [{item.__class__.__name__}]", "AZFILE", 1005)

    @staticmethod
    def _join(prefix: str, name: str) -> str:
        return f"{prefix}/{name}" if prefix else name

    @wrap_azure_errors
    def upload_file(self,
                    path: str,
                    data,
                    metadata: t.Optional[dict[str, str]] = None,
                    content_type: t.Optional[str] = None,
                    length: t.Optional[int] = None):
        args = {
            'data': data,
            'metadata': metadata or {},
        }
        if content_type:
            args['content_settings'] = ContentSettings(content_type=content_type)
        if length is not None:
            args['length'] = length
        self.file_client(path).upload_file(**args)

    @wrap_azure_errors
    def download_file(self, path: str, offset: t.Optional[int] = None, length: t.Optional[int] = None) -> t.Iterable[bytes]:
        stream = self.file_client(path).download_file(offset=offset, length=length)
        yield from stream.chunks()

    @wrap_azure_errors
    def delete_file(self, path: str):
        self.file_client(path).delete_file()

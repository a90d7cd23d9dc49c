"""Storage backed by an Azure file share."""
import base64
import typing as t

import zrlog
from azure.core.credentials import AzureNamedKeyCredential
from azure.identity import DefaultAzureCredential
from azure.storage.fileshare import ShareClient

from sharestore.util import HaltFlag, ShareStoreError
from .entity import Entity, EntityMode, format_record, caller_path
from .errors import StorageOperationError, StorageInitError, OptionUnsupportedError, is_not_found
from .options import StorageOptions, Endpoint, Credential, CREDENTIAL_HMAC
from .paths import abs_path, parent_dir
from .reconcile import make_dirs, CURRENT_DIR
from .remote import ShareRemote

Type = "azfile"


def build_share_client(options: StorageOptions) -> ShareClient:
    """Build the SDK client for the share described by the options."""
    if options.connection_string:
        return ShareClient.from_connection_string(
            conn_str=options.connection_string,
            share_name=options.share_name
        )
    endpoint = Endpoint.parse(options.endpoint)
    credential = Credential.parse(options.credential)
    if credential.protocol == CREDENTIAL_HMAC:
        return ShareClient(
            account_url=endpoint.url(),
            share_name=options.share_name,
            credential=AzureNamedKeyCredential(credential.account_name, credential.account_key)
        )
    return ShareClient(
        account_url=endpoint.url(),
        share_name=options.share_name,
        credential=DefaultAzureCredential(),
        token_intent="backup"
    )


class AzureFileStorage:
    """Files and directories on an Azure file share, scoped to a work directory.

        The work directory is created when the storage is built. Every operation maps
        the caller path onto the share, runs one or more remote calls in sequence and
        raises StorageOperationError on failure. A halt flag, if given, is checked
        before every remote call.

        Every entity returned, whatever the operation, has the path on the share
        (work directory included, no leading slash) as its ID and the path below the
        work directory (no leading slash, empty for the work directory) as its path.
    """

    def __init__(self,
                 options: StorageOptions,
                 remote: t.Optional[ShareRemote] = None,
                 halt_flag: t.Optional[HaltFlag] = None):
        self._log = zrlog.get_logger("sharestore.azfile")
        self._options = options
        self._halt_flag = halt_flag
        self.work_dir = options.work_dir
        self._root = self.work_dir.strip("/")
        try:
            options.validate()
            self._remote = remote if remote is not None else ShareRemote(build_share_client(options))
            self._breakpoint()
            self._remote.create_directory(self._root, dict(options.default_metadata))
        except ShareStoreError as ex:
            raise StorageInitError("new_storager", Type, ex, options) from ex
        except ValueError as ex:
            raise StorageInitError("new_storager", Type, ex, options) from ex
        self._log.info(f"Storage [{options.name}] ready on share [{options.share_name}] at [{self.work_dir}]")

    def __str__(self):
        return f"Storager {Type} {{WorkDir: {self.work_dir}}}"

    @property
    def options(self) -> StorageOptions:
        return self._options

    @property
    def features(self):
        return self._options.features

    def metadata(self) -> dict:
        """Describe the storage."""
        return {
            'type': Type,
            'name': self._options.share_name,
            'work_dir': self.work_dir,
            'loose_options': self._options.features.loose_options,
        }

    def create(self, path: str, as_dir: bool = False) -> Entity:
        """Build an entity for the path without contacting the share."""
        return self._entity(self._work_relative(path), False, EntityMode.DIR if as_dir else EntityMode.READ)

    def create_dir(self, path: str, metadata: t.Optional[dict[str, str]] = None, **kwargs) -> Entity:
        """Make sure the directory and all of its parents exist."""
        self._check_options("create_dir", kwargs)
        target = self._work_relative(path)
        try:
            make_dirs(self._remote, target, self._root, self._halt_flag, self._metadata(metadata))
        except ShareStoreError as ex:
            raise StorageOperationError("create_dir", ex, self, [path]) from ex
        return self._entity(target, True, EntityMode.DIR)

    def stat(self, path: str, as_dir: bool = False, **kwargs) -> Entity:
        """Retrieve the properties of a file, or of a directory if as_dir is set."""
        self._check_options("stat", kwargs)
        target = self._work_relative(path)
        remote_path = self._remote_path(target)
        try:
            self._breakpoint()
            if as_dir:
                props = self._remote.get_directory_properties(remote_path)
            else:
                props = self._remote.get_file_properties(remote_path)
        except ShareStoreError as ex:
            raise StorageOperationError("stat", ex, self, [path]) from ex
        entity = self._entity(target, True)
        entity.last_modified = props.last_modified
        entity.etag = props.etag
        entity.metadata = dict(props.metadata or {})
        if as_dir:
            entity.mode |= EntityMode.DIR
            return entity
        entity.mode |= EntityMode.READ
        entity.set_content_length(props.size)
        settings = props.content_settings
        if settings is not None:
            entity.content_type = settings.content_type
            if settings.content_md5:
                entity.content_md5 = base64.b64encode(bytes(settings.content_md5)).decode("ascii")
        return entity

    def list(self, path: str = "", **kwargs) -> t.Iterable[Entity]:
        """List the files and directories directly below a directory.

            Entities are produced lazily from a single pass over the remote listing.
        """
        self._check_options("list", kwargs)
        remote_path = self._remote_path(self._work_relative(path))
        try:
            self._breakpoint()
            for record in HaltFlag.iterate(self._remote.list_directory(remote_path), self._halt_flag, True):
                yield format_record(self, record)
        except ShareStoreError as ex:
            raise StorageOperationError("list", ex, self, [path]) from ex

    def write(self,
              path: str,
              data,
              size: t.Optional[int] = None,
              content_type: t.Optional[str] = None,
              metadata: t.Optional[dict[str, str]] = None,
              **kwargs) -> Entity:
        """Upload data to a file, creating its parent directories first."""
        self._check_options("write", kwargs)
        target = self._work_relative(path)
        try:
            make_dirs(self._remote, parent_dir(target), self._root, self._halt_flag, dict(self._options.default_metadata))
            self._breakpoint()
            self._remote.upload_file(
                self._remote_path(target),
                data,
                self._metadata(metadata),
                content_type or self._options.default_content_type,
                size
            )
        except ShareStoreError as ex:
            raise StorageOperationError("write", ex, self, [path]) from ex
        entity = self._entity(target, False, EntityMode.READ)
        if size:
            entity.set_content_length(size)
        return entity

    def read(self, path: str, offset: t.Optional[int] = None, size: t.Optional[int] = None, **kwargs) -> t.Iterable[bytes]:
        """Download a file (or part of one) as chunks of bytes."""
        self._check_options("read", kwargs)
        remote_path = self._remote_path(self._work_relative(path))
        try:
            self._breakpoint()
            yield from HaltFlag.iterate(self._remote.download_file(remote_path, offset, size), self._halt_flag, True)
        except ShareStoreError as ex:
            raise StorageOperationError("read", ex, self, [path]) from ex

    def delete(self, path: str, as_dir: bool = False, **kwargs):
        """Remove a file or an empty directory. Removing something that does not exist succeeds."""
        self._check_options("delete", kwargs)
        remote_path = self._remote_path(self._work_relative(path))
        try:
            self._breakpoint()
            if as_dir:
                self._remote.delete_directory(remote_path)
            else:
                self._remote.delete_file(remote_path)
        except ShareStoreError as ex:
            if is_not_found(ex):
                self._log.debug(f"Nothing to delete at [{remote_path}]")
                return
            raise StorageOperationError("delete", ex, self, [path]) from ex

    def _work_relative(self, path: str) -> str:
        # abs_path then caller_path gives the same target whether or not the caller included the work dir
        target = caller_path(self.work_dir, abs_path(self.work_dir, path)).rstrip("/")
        return target or CURRENT_DIR

    def _entity(self, target: str, done: bool, mode: EntityMode = EntityMode.NONE) -> Entity:
        entity = Entity(self, done)
        entity.id = self._remote_path(target)
        entity.path = "" if target == CURRENT_DIR else target
        entity.mode = mode
        return entity

    def _remote_path(self, target: str) -> str:
        if target == CURRENT_DIR:
            return self._root
        if not self._root:
            return target
        return f"{self._root}/{target}"

    def _metadata(self, metadata: t.Optional[dict[str, str]]) -> dict[str, str]:
        result = dict(self._options.default_metadata)
        if metadata:
            result.update(metadata)
        return result

    def _breakpoint(self):
        if self._halt_flag is not None:
            self._halt_flag.breakpoint()

    def _check_options(self, op: str, kwargs: dict):
        if not kwargs:
            return
        if self._options.features.loose_options:
            self._log.debug(f"Ignoring unsupported options for [{op}]: {', '.join(kwargs.keys())}")
            return
        name = next(iter(kwargs))
        raise StorageOperationError(op, OptionUnsupportedError(name, kwargs[name]), self)

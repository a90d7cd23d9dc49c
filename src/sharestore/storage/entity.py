"""Entities returned to callers and the conversion of listing records into them."""
from __future__ import annotations
import datetime
import enum
import typing as t

from .paths import rel_path


class EntityMode(enum.Flag):
    """What an entity can be used for."""

    NONE = 0
    READ = enum.auto()
    DIR = enum.auto()


class FileRecord(t.NamedTuple):
    """A file as reported by a directory listing; name is relative to the share root."""

    name: str
    content_length: int = 0


class DirectoryRecord(t.NamedTuple):
    """A directory as reported by a directory listing; name is relative to the share root."""

    name: str


class Entity:
    """A file or directory on the share.

        ``id`` is the path on the share and ``path`` is the path as the caller sees it.
        ``done`` is False for entities that were built locally and never fetched.
    """

    def __init__(self, storage=None, done: bool = True):
        self.storage = storage
        self.done = done
        self.id: str = ""
        self.path: str = ""
        self.mode: EntityMode = EntityMode.NONE
        self.content_length: t.Optional[int] = None
        self.content_type: t.Optional[str] = None
        self.content_md5: t.Optional[str] = None
        self.etag: t.Optional[str] = None
        self.last_modified: t.Optional[datetime.datetime] = None
        self.metadata: dict[str, str] = {}

    def __repr__(self):
        return f"<Entity {self.mode} {self.id!r} path={self.path!r}>"

    def __eq__(self, other):
        if not isinstance(other, Entity):
            return NotImplemented
        return (
            self.id == other.id
            and self.path == other.path
            and self.mode == other.mode
            and self.content_length == other.content_length
        )

    def is_dir(self) -> bool:
        return bool(self.mode & EntityMode.DIR)

    def is_file(self) -> bool:
        return bool(self.mode & EntityMode.READ)

    def has_content_length(self) -> bool:
        return self.content_length is not None

    def set_content_length(self, length: int):
        self.content_length = length


def caller_path(work_dir: str, name: str) -> str:
    """Caller path of a name relative to the share root, without a leading slash."""
    path = rel_path(work_dir, name)
    return path[1:] if path.startswith("/") else path


def format_file(storage, record: FileRecord) -> Entity:
    entity = Entity(storage, True)
    entity.id = record.name
    entity.path = caller_path(storage.work_dir, record.name)
    entity.mode |= EntityMode.READ
    # A zero length is treated as not reported
    if record.content_length:
        entity.set_content_length(record.content_length)
    return entity


def format_dir(storage, record: DirectoryRecord) -> Entity:
    entity = Entity(storage, True)
    entity.id = record.name
    entity.path = caller_path(storage.work_dir, record.name)
    entity.mode |= EntityMode.DIR
    return entity


def format_record(storage, record: t.Union[FileRecord, DirectoryRecord]) -> Entity:
    if isinstance(record, FileRecord):
        return format_file(storage, record)
    return format_dir(storage, record)

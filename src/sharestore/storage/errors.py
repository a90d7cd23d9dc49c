"""Error taxonomy for storage operations.

    Errors raised by the Azure SDK are converted exactly once, at the boundary with the
    remote client, into one of a small set of provider independent kinds. Anything that
    has already been converted (or that was raised by sharestore itself) is an
    InternalError and is never converted again.
"""
import enum
import functools
import inspect
import typing as t

import azure.core.exceptions as ace

from sharestore.util import ShareStoreError


class ErrorKind(enum.Enum):
    """Kinds of storage failure a caller can rely on."""

    NOT_EXIST = "not_exist"
    PERMISSION_DENIED = "permission_denied"
    UNEXPECTED = "unexpected"
    ALREADY_CLASSIFIED = "already_classified"


# Service error codes reported by the file share service
RESOURCE_NOT_FOUND = "ResourceNotFound"
INSUFFICIENT_ACCOUNT_PERMISSIONS = "InsufficientAccountPermissions"
RESOURCE_ALREADY_EXISTS = "ResourceAlreadyExists"

# File not found status
FILE_NOT_FOUND = 404


class InternalError(ShareStoreError):
    """Marker for errors that have already been classified and must be passed through as-is."""

    kind: ErrorKind = ErrorKind.ALREADY_CLASSIFIED


class ClassifiedError(InternalError):
    """An error from the remote service mapped into the storage taxonomy.

        The error from the SDK is kept as both ``original`` and ``__cause__``.
    """

    kind: ErrorKind = ErrorKind.UNEXPECTED
    _code_number: int = 2000
    _is_recoverable: bool = False

    def __init__(self, original: BaseException):
        super().__init__(
            f"{self._describe()}: {original.__class__.__name__}: {str(original)}",
            "STORAGE",
            self._code_number,
            self._is_recoverable
        )
        self.original = original
        self.__cause__ = original
        self.status_code: t.Optional[int] = getattr(original, "status_code", None)
        self.error_code: t.Optional[str] = getattr(original, "error_code", None)

    def _describe(self) -> str:
        return "Unexpected error"


class ObjectNotExist(ClassifiedError):

    kind = ErrorKind.NOT_EXIST
    _code_number = 2001

    def _describe(self) -> str:
        return "Object does not exist"


class PermissionDenied(ClassifiedError):

    kind = ErrorKind.PERMISSION_DENIED
    _code_number = 2002
    _is_recoverable = True

    def _describe(self) -> str:
        return "Permission denied"


class UnexpectedError(ClassifiedError):
    pass


class OptionUnsupportedError(InternalError):
    """Raised when an option or configuration value is not supported by the storage."""

    def __init__(self, name: str, value=None):
        super().__init__(f"Option [{name}] with value [{value}] is not supported", "STORAGE", 1001)
        self.name = name
        self.value = value


def classify_error(err: t.Optional[BaseException]) -> t.Optional[BaseException]:
    """Convert an error raised by the SDK into the storage error taxonomy."""
    if err is None:
        return None
    if isinstance(err, InternalError):
        return err
    if isinstance(err, ace.HttpResponseError):
        code = getattr(err, "error_code", None)
        if not code:
            if err.status_code == FILE_NOT_FOUND:
                return ObjectNotExist(err)
            return UnexpectedError(err)
        if code == RESOURCE_NOT_FOUND:
            return ObjectNotExist(err)
        if code == INSUFFICIENT_ACCOUNT_PERMISSIONS:
            return PermissionDenied(err)
        return UnexpectedError(err)
    return UnexpectedError(err)


def is_not_found(err: BaseException) -> bool:
    """Check if a classified error means the target is missing."""
    if getattr(err, "kind", None) == ErrorKind.NOT_EXIST:
        return True
    return getattr(err, "status_code", None) == FILE_NOT_FOUND


def wrap_azure_errors(cb):
    """Classifies any error raised by the wrapped call, including while iterating a generator."""

    if inspect.isgeneratorfunction(cb):

        @functools.wraps(cb)
        def _inner_gen(*args, **kwargs):
            try:
                yield from cb(*args, **kwargs)
            except (ace.AzureError, ValueError) as ex:
                raise classify_error(ex) from ex

        return _inner_gen

    @functools.wraps(cb)
    def _inner(*args, **kwargs):
        try:
            return cb(*args, **kwargs)
        except (ace.AzureError, ValueError) as ex:
            raise classify_error(ex) from ex

    return _inner


class StorageOperationError(ShareStoreError):
    """Failure of a single storage operation, as seen by the caller."""

    def __init__(self, op: str, err: BaseException, storage=None, paths: t.Sequence[str] = None):
        self.op = op
        self.err = classify_error(err)
        self.storage = storage
        self.paths = list(paths or [])
        super().__init__(
            f"Storage operation [{op}] on {self.paths} failed in [{storage}]: {self.err}",
            "STORAGE",
            3000,
            getattr(self.err, "is_recoverable", False)
        )
        self.__cause__ = self.err

    @property
    def kind(self) -> ErrorKind:
        return getattr(self.err, "kind", ErrorKind.UNEXPECTED)

    def unwrap(self) -> BaseException:
        return self.err


class StorageInitError(ShareStoreError):
    """Failure while constructing a storage, carrying the options that produced it."""

    def __init__(self, op: str, type_: str, err: BaseException, options=None):
        self.op = op
        self.type = type_
        self.err = classify_error(err)
        self.options = options
        super().__init__(f"Could not initialize [{type_}] storage during [{op}] with {options}: {self.err}", "STORAGE", 3001)
        self.__cause__ = self.err

    @property
    def kind(self) -> ErrorKind:
        return getattr(self.err, "kind", ErrorKind.UNEXPECTED)

    def unwrap(self) -> BaseException:
        return self.err

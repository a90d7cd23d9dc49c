"""
    Provides access to Azure file shares through a provider independent storage interface.

    In general, one should use the StorageController to get a storage by the name it is
    configured under. The storage maps caller paths onto the share below its work
    directory, creates missing directories as needed and converts errors from the
    Azure SDK into a small set of kinds (see ErrorKind).

    Caller paths may either include the work directory (e.g. /data/a/b with a work
    directory of /data) or be given relative to it with a leading slash (e.g. /a/b).
    Note that a relative path without a leading slash is joined to the work directory
    without a separator when building entity IDs.
"""
from .core import StorageController
from .azure_files import AzureFileStorage
from .entity import Entity, EntityMode
from .errors import ErrorKind, StorageOperationError, StorageInitError, classify_error
from .options import StorageOptions, StorageFeatures

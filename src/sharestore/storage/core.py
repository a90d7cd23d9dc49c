import threading
import typing as t

import zirconium as zr
import zrlog
from autoinject import injector

from .azure_files import AzureFileStorage, Type
from .errors import StorageInitError
from .options import StorageOptions
from sharestore.util import HaltFlag, ConfigError


@injector.injectable_global
class StorageController:
    """Builds file share storages from the ``[sharestore.storage.NAME]`` configuration sections.

        Storages without a halt flag are shared per name, since they hold no state
        after they are built.
    """

    config: zr.ApplicationConfig = None

    @injector.construct
    def __init__(self):
        self._log = zrlog.get_logger("sharestore.controller")
        self._storages: dict[str, AzureFileStorage] = {}
        self._lock = threading.Lock()

    def options(self, name: str) -> StorageOptions:
        return StorageOptions.from_config(self.config, name)

    def get_storage(self, name: str, halt_flag: t.Optional[HaltFlag] = None) -> AzureFileStorage:
        """Get the storage with the given name."""
        if halt_flag is not None:
            return AzureFileStorage(self._load_options(name), halt_flag=halt_flag)
        with self._lock:
            if name not in self._storages:
                self._log.debug(f"Building storage [{name}]")
                self._storages[name] = AzureFileStorage(self._load_options(name))
            return self._storages[name]

    def _load_options(self, name: str) -> StorageOptions:
        try:
            return self.options(name)
        except ConfigError as ex:
            raise StorageInitError("new_storager", Type, ex) from ex

import logging
import os
import pathlib

import zirconium as zr
import zrlog

__VERSION__ = "0.1.0"


def _config_paths():
    yield pathlib.Path(".").absolute()
    yield pathlib.Path("~").expanduser().absolute()
    custom_config_path = os.environ.get("SHARESTORE_CONFIG_SEARCH_PATHS", "./config")
    if custom_config_path:
        paths = custom_config_path.split(";")
        for path in paths:
            if path:
                p = pathlib.Path(path).absolute()
                if p.exists():
                    yield p


def init_sharestore(app_type: str):
    # The Azure SDK logs every request at INFO
    logging.getLogger("azure").setLevel(logging.WARNING)

    @zr.configure
    def set_config(app_config: zr.ApplicationConfig):
        config_paths = [x for x in _config_paths()]
        logging.getLogger("sharestore.boot").info(f"Config Search Paths: {';'.join(str(x) for x in config_paths)}")
        for path in config_paths:
            app_config.register_default_file(path / ".sharestore.defaults.toml")
            app_config.register_default_file(path / f".sharestore.{app_type}.defaults.toml")
            app_config.register_file(path / ".sharestore.toml")
            app_config.register_file(path / f".sharestore.{app_type}.toml")

    zrlog.set_default_extra("version", __VERSION__)
    zrlog.set_default_extra("app_type", app_type)
    zrlog.init_logging()

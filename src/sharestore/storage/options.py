"""Configuration of a single file share storage."""
from __future__ import annotations
import types
import typing as t
from urllib.parse import urlparse

import zirconium as zr

from sharestore.util import ConfigError
from .errors import OptionUnsupportedError


PROTOCOL_HTTP = "http"
PROTOCOL_HTTPS = "https"
CREDENTIAL_HMAC = "hmac"
CREDENTIAL_ENV = "env"


class Endpoint:
    """An endpoint in the form ``https:host[:port]`` or a full http(s) URL."""

    def __init__(self, protocol: str, host: str, port: t.Optional[int] = None):
        self.protocol = protocol
        self.host = host
        self.port = port

    def url(self) -> str:
        if self.port is None:
            return f"{self.protocol}://{self.host}"
        return f"{self.protocol}://{self.host}:{self.port}"

    @staticmethod
    def parse(value: str) -> Endpoint:
        if value.startswith("http://") or value.startswith("https://"):
            pieces = urlparse(value)
            if not pieces.hostname:
                raise OptionUnsupportedError("endpoint", value)
            return Endpoint(pieces.scheme, pieces.hostname, pieces.port)
        protocol, _, rest = value.partition(":")
        if protocol not in (PROTOCOL_HTTP, PROTOCOL_HTTPS) or not rest:
            raise OptionUnsupportedError("endpoint", value)
        host, _, port = rest.partition(":")
        if not port:
            return Endpoint(protocol, host)
        try:
            return Endpoint(protocol, host, int(port))
        except ValueError as ex:
            raise OptionUnsupportedError("endpoint", value) from ex


class Credential:
    """A credential in the form ``hmac:account:key`` or ``env``."""

    def __init__(self, protocol: str, account_name: str = None, account_key: str = None):
        self.protocol = protocol
        self.account_name = account_name
        self.account_key = account_key

    def __repr__(self):
        return f"<Credential {self.protocol}>"

    @staticmethod
    def parse(value: str) -> Credential:
        if value == CREDENTIAL_ENV:
            return Credential(CREDENTIAL_ENV)
        protocol, _, rest = value.partition(":")
        if protocol != CREDENTIAL_HMAC:
            raise OptionUnsupportedError("credential", protocol)
        account_name, _, account_key = rest.partition(":")
        if not account_name or not account_key:
            raise OptionUnsupportedError("credential", protocol)
        return Credential(CREDENTIAL_HMAC, account_name, account_key)


class StorageFeatures:
    """Optional behaviours of a storage."""

    def __init__(self, loose_options: bool = False):
        self.loose_options = loose_options

    def __repr__(self):
        return f"<StorageFeatures loose_options={self.loose_options}>"


class StorageOptions:
    """Immutable settings used to build a file share storage.

        Either ``connection_string`` or both ``endpoint`` and ``credential`` must be set,
        which is checked by ``validate()`` when a storage is built from them.
    """

    __slots__ = ("name", "share_name", "endpoint", "credential", "connection_string", "work_dir",
                 "default_metadata", "default_content_type", "features")

    def __init__(self,
                 share_name: str,
                 endpoint: t.Optional[str] = None,
                 credential: t.Optional[str] = None,
                 connection_string: t.Optional[str] = None,
                 work_dir: t.Optional[str] = None,
                 default_metadata: t.Optional[dict[str, str]] = None,
                 default_content_type: t.Optional[str] = None,
                 features: t.Optional[StorageFeatures] = None,
                 name: t.Optional[str] = None):
        _set = super().__setattr__
        _set("name", name or share_name)
        _set("share_name", share_name)
        _set("endpoint", endpoint)
        _set("credential", credential)
        _set("connection_string", connection_string)
        _set("work_dir", work_dir or "/")
        _set("default_metadata", types.MappingProxyType(dict(default_metadata or {})))
        _set("default_content_type", default_content_type)
        _set("features", features or StorageFeatures())

    def __setattr__(self, key, value):
        raise AttributeError(f"StorageOptions are read-only [{key}]")

    def __repr__(self):
        # Credentials are left out on purpose so that errors can carry the options
        return f"<StorageOptions {self.name} share={self.share_name} endpoint={self.endpoint} work_dir={self.work_dir}>"

    def validate(self):
        """Check that the options are complete enough to reach a share."""
        if not self.share_name:
            raise OptionUnsupportedError("share_name", self.share_name)
        if self.connection_string:
            return
        if not self.endpoint:
            raise OptionUnsupportedError("endpoint", self.endpoint)
        if not self.credential:
            raise OptionUnsupportedError("credential", self.credential)
        Endpoint.parse(self.endpoint)
        Credential.parse(self.credential)

    @staticmethod
    def from_config(config: zr.ApplicationConfig, name: str) -> StorageOptions:
        """Build options from the ``[sharestore.storage.NAME]`` section of the configuration."""
        key = ("sharestore", "storage", name)
        if not config.get(key, default=None):
            raise ConfigError(f"No storage named [{name}] is configured", 1000)
        return StorageOptions(
            name=name,
            share_name=config.as_str(key + ("share_name",), default=None),
            endpoint=config.as_str(key + ("endpoint",), default=None),
            credential=config.as_str(key + ("credential",), default=None),
            connection_string=config.as_str(key + ("connection_string",), default=None),
            work_dir=config.as_str(key + ("work_dir",), default="/"),
            default_metadata=config.as_dict(key + ("default_metadata",), default={}),
            default_content_type=config.as_str(key + ("default_content_type",), default=None),
            features=StorageFeatures(
                loose_options=config.as_bool(key + ("loose_options",), default=False)
            )
        )

"""Typed errors reported back to the storage control plane."""

from __future__ import annotations

from typing import List


class StorageError(RuntimeError):
    """Base error for storage-related failures.

    ``code`` and ``params`` are the wire form of the error: the control plane
    identifies failures by name and positional arguments, not by message text.
    """

    code = "Storage_error"

    def __init__(self, message: str, *params):
        super().__init__(message)
        self.params = list(params)


class SrNotAttachedError(StorageError):
    code = "Sr_not_attached"

    def __init__(self, sr: str):
        super().__init__(f"SR '{sr}' is not attached", sr)
        self.sr = sr


class SrAttachedError(StorageError):
    code = "Sr_attached"

    def __init__(self, sr: str):
        super().__init__(f"SR '{sr}' is already attached", sr)
        self.sr = sr


class MissingConfigurationParameterError(StorageError):
    code = "Missing_configuration_parameter"

    def __init__(self, key: str):
        super().__init__(f"Required device_config key '{key}' not present", key)
        self.key = key


class BackendError(StorageError):
    code = "Backend_error"

    def __init__(self, source: str, messages: List[str]):
        joined = "; ".join(messages)
        super().__init__(f"{source}: {joined}", source, list(messages))
        self.source = source
        self.messages = list(messages)


class XmlPathNotFoundError(StorageError):
    code = "Xml_path_not_found"

    def __init__(self, path: List[str]):
        joined = "/".join(reversed(path))
        super().__init__(f"Element '{joined}' not found in descriptor", joined)
        self.path = list(path)


class UnimplementedError(StorageError):
    code = "Unimplemented"

    def __init__(self, operation: str):
        super().__init__(f"Operation '{operation}' is not supported", operation)
        self.operation = operation


class VolumeCreationLostError(RuntimeError):
    """A volume vanished between ``createXML`` and the lookup that follows it.

    Not a StorageError: nothing translates it, the request fails hard.
    """

    def __init__(self, pool: str, volume: str):
        super().__init__(
            f"Failed to find volume '{volume}' in storage pool '{pool}': create silently failed?"
        )
        self.pool = pool
        self.volume = volume

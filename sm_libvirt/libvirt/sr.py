from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, NoReturn, Optional

from xml.sax.saxutils import escape

from .connection import LibvirtConnectionManager
from .errors import MissingConfigurationParameterError
from .query import CONFIG_NAME, CONFIG_URI, CONFIG_XML, UnsupportedSrOperation, unsupported
from .registry import AttachedSrRegistry
from .translate import call_libvirt
from .vdi import vdi_info_of_name

logger = logging.getLogger(__name__)


def optional(device_config: Mapping[str, str], key: str) -> Optional[str]:
    return device_config.get(key)


def require(device_config: Mapping[str, str], key: str) -> str:
    if key not in device_config:
        logger.error("Required device_config:%s not present", key)
        raise MissingConfigurationParameterError(key)
    return device_config[key]


def build_pool_xml(name: str, fragment: str) -> str:
    # The fragment is caller-supplied pool XML and goes in verbatim.
    return "<pool type=\"dir\"><name>{name}</name>{fragment}</pool>".format(
        name=escape(name),
        fragment=fragment,
    )


class LibvirtSrOperations:
    """SR lifecycle: bind control-plane SR ids to libvirt storage pools."""

    def __init__(self, registry: AttachedSrRegistry, connections: LibvirtConnectionManager):
        self._registry = registry
        self._connections = connections

    def attach(self, sr: str, device_config: Mapping[str, str]) -> None:
        name = require(device_config, CONFIG_NAME)
        uri = optional(device_config, CONFIG_URI)
        try:
            conn = self._connections.resolve(uri)
            pool = call_libvirt(conn.storagePoolLookupByName, name)
            self._registry.put(sr, pool)
        except Exception:
            self._connections.close_if_unused()
            raise
        logger.info("Attached SR %s to storage pool %s", sr, name)

    def create(self, sr: str, device_config: Mapping[str, str], physical_size: int) -> None:
        # physical_size is accepted for interface conformance; dir pools ignore it.
        name = require(device_config, CONFIG_NAME)
        uri = optional(device_config, CONFIG_URI)
        fragment = require(device_config, CONFIG_XML)
        pool_xml = build_pool_xml(name, fragment)
        try:
            conn = self._connections.resolve(uri)
            call_libvirt(conn.storagePoolCreateXML, pool_xml, 0)
        finally:
            self._connections.close_if_unused()
        logger.info("Created storage pool %s for SR %s", name, sr)

    def detach(self, sr: str) -> None:
        self._registry.remove(sr)
        logger.info("Detached SR %s", sr)
        self._connections.close_if_unused()

    def scan(self, sr: str) -> List[Dict[str, Any]]:
        pool = self._registry.get(sr)
        names = call_libvirt(pool.listVolumes) or []
        results: List[Dict[str, Any]] = []
        for name in names:
            info = vdi_info_of_name(pool, name)
            if info is not None:
                results.append(info)
        return results

    def unsupported(self, operation: UnsupportedSrOperation) -> NoReturn:
        unsupported("SR", operation)

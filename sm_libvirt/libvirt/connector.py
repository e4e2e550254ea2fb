import logging
from typing import Any, Callable, Dict, Optional

from .connection import LibvirtConnectionManager
from .query import diagnostics, query
from .registry import AttachedSrRegistry
from .sr import LibvirtSrOperations
from .vdi import LibvirtVdiOperations

logger = logging.getLogger(__name__)


class LibvirtStorageConnector:
    """Storage connector instance: one registry, one shared connection, SR and VDI operations."""

    def __init__(self, default_uri: Optional[str] = None, opener: Optional[Callable] = None):
        self.registry = AttachedSrRegistry()
        self.connections = LibvirtConnectionManager(
            self.registry, opener=opener, default_uri=default_uri
        )
        self.sr = LibvirtSrOperations(self.registry, self.connections)
        self.vdi = LibvirtVdiOperations(self.registry, self.connections)

    def query(self) -> Dict[str, Any]:
        return query()

    def diagnostics(self) -> str:
        return diagnostics()

    def status(self) -> Dict[str, Any]:
        return {
            "attached_srs": self.registry.count(),
            "connected": self.connections.connected,
            "uri": self.connections.uri,
        }

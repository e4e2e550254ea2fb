import logging
from typing import Callable, Optional

import libvirt

from .errors import BackendError
from .registry import AttachedSrRegistry
from .translate import BACKEND_NAME, call_libvirt

logger = logging.getLogger(__name__)


class LibvirtConnectionManager:
    """Holds the one libvirt connection shared by every attached SR.

    The connection is opened lazily by ``resolve`` and closed by
    ``close_if_unused`` once the registry reports no attached SRs.
    """

    def __init__(
        self,
        registry: AttachedSrRegistry,
        opener: Optional[Callable[[Optional[str]], "libvirt.virConnect"]] = None,
        default_uri: Optional[str] = None,
    ):
        self._registry = registry
        self._open = opener or libvirt.open
        self._default_uri = default_uri
        self.conn: Optional[libvirt.virConnect] = None
        self.uri: Optional[str] = None

    @property
    def connected(self) -> bool:
        return self.conn is not None

    def _describe(self, uri: Optional[str]) -> str:
        return uri or "<default URI>"

    def resolve(self, uri: Optional[str] = None) -> "libvirt.virConnect":
        """Return the shared connection, opening it on first use.

        ``uri`` only matters when no connection exists yet; an open connection
        is returned as-is even if it points at a different hypervisor.
        """
        if self.conn is not None:
            if uri and uri != self.uri:
                logger.warning(
                    "Reusing connection to %s; requested URI %s is ignored",
                    self._describe(self.uri),
                    uri,
                )
            return self.conn

        target = uri or self._default_uri
        logger.info("Connecting to %s", self._describe(target))
        conn = call_libvirt(self._open, target)
        if conn is None:
            logger.error("Failed to connect to %s", self._describe(target))
            raise BackendError(
                BACKEND_NAME, [f"Failed to open connection to {self._describe(target)}"]
            )
        logger.info("Connected to %s", self._describe(target))
        self.conn = conn
        self.uri = target
        return conn

    def close_if_unused(self) -> bool:
        """Close the shared connection if no SR is attached. Returns True if closed."""
        if self._registry.count() > 0 or self.conn is None:
            return False

        conn, uri = self.conn, self.uri
        self.conn = None
        self.uri = None
        logger.info("Disconnecting from %s", self._describe(uri))
        call_libvirt(conn.close)
        return True

    release = close_if_unused

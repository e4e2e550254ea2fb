import logging
from typing import Optional
from sm_libvirt.libvirt.connector import LibvirtStorageConnector
from sm_libvirt.core.config import LIBVIRT_DEFAULT_URI

logger = logging.getLogger(__name__)
_connector: Optional[LibvirtStorageConnector] = None

def get_connector() -> LibvirtStorageConnector:
    global _connector
    if _connector is None:
        logger.info("Initializing libvirt storage connector (default URI %s)", LIBVIRT_DEFAULT_URI)
        _connector = LibvirtStorageConnector(default_uri=LIBVIRT_DEFAULT_URI)
    return _connector

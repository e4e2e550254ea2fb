"""Static description of what this storage connector can do."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, NoReturn

from .errors import UnimplementedError

DRIVER = "libvirt"
NAME = "sm-libvirt"
JSON_SUFFIX = ".json"
# Runtime state location; cleared on host reboot.
STATE_PATH = f"/var/run/nonpersistent/{NAME}{JSON_SUFFIX}"
DESCRIPTION = "XCP -> libvirt storage connector"
VENDOR = "Citrix"
COPYRIGHT = "Citrix Inc"
MAJOR_VERSION = 0
MINOR_VERSION = 1
VERSION = f"{MAJOR_VERSION}.{MINOR_VERSION}"
REQUIRED_API_VERSION = "2.0"

FEATURES = [
    "VDI_CREATE",
    "VDI_DELETE",
    "VDI_ATTACH",
    "VDI_DETACH",
    "VDI_ACTIVATE",
    "VDI_DEACTIVATE",
]

# device_config keys
CONFIG_XML = "xml"
CONFIG_NAME = "name"
CONFIG_URI = "uri"

CONFIGURATION = {
    CONFIG_XML: "XML fragment describing the storage pool configuration",
    CONFIG_NAME: "name of the libvirt storage pool",
    CONFIG_URI: "URI of the hypervisor to use",
}


class UnsupportedSrOperation(str, Enum):
    LIST = "list"
    DESTROY = "destroy"
    STAT = "stat"
    RESET = "reset"
    UPDATE_SNAPSHOT_INFO_SRC = "update_snapshot_info_src"
    UPDATE_SNAPSHOT_INFO_DEST = "update_snapshot_info_dest"


class UnsupportedVdiOperation(str, Enum):
    CLONE = "clone"
    SNAPSHOT = "snapshot"
    RESIZE = "resize"
    STAT = "stat"
    EPOCH_BEGIN = "epoch_begin"
    EPOCH_END = "epoch_end"
    GET_URL = "get_url"
    SET_PERSISTENT = "set_persistent"
    COMPOSE = "compose"
    SIMILAR_CONTENT = "similar_content"
    ADD_TO_SM_CONFIG = "add_to_sm_config"
    REMOVE_FROM_SM_CONFIG = "remove_from_sm_config"
    SET_CONTENT_ID = "set_content_id"
    GET_BY_NAME = "get_by_name"


def unsupported(kind: str, operation: Enum) -> NoReturn:
    """Shared default for every operation this connector does not implement."""
    raise UnimplementedError(f"{kind}.{operation.value}")


def query() -> Dict[str, Any]:
    return {
        "driver": DRIVER,
        "name": NAME,
        "description": DESCRIPTION,
        "vendor": VENDOR,
        "copyright": COPYRIGHT,
        "version": VERSION,
        "required_api_version": REQUIRED_API_VERSION,
        "features": list(FEATURES),
        "configuration": dict(CONFIGURATION),
    }


def diagnostics() -> str:
    return "Not available"

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, NoReturn, Optional

import libvirt
from xml.sax.saxutils import escape

from .connection import LibvirtConnectionManager
from .errors import VolumeCreationLostError
from .naming import choose_name
from .query import UnsupportedVdiOperation, unsupported
from .registry import AttachedSrRegistry
from .translate import call_libvirt, describe_libvirt_error
from .xmlpath import VOLUME_TARGET_PATH, read_xml_path

logger = logging.getLogger(__name__)

VOLUME_SUFFIX = ".img"


def iso8601_of_timestamp(value: float) -> str:
    return datetime.fromtimestamp(value, tz=timezone.utc).strftime("%Y%m%dT%H:%M:%SZ")


def _pool_name(pool: "libvirt.virStoragePool") -> str:
    try:
        return pool.name()
    except libvirt.libvirtError:
        return "<unknown>"


def vdi_info_of_name(pool: "libvirt.virStoragePool", name: str) -> Optional[Dict[str, Any]]:
    """Build the VDI record for volume ``name``, or None if libvirt cannot produce one.

    Lookup failures are logged and reported as None so best-effort callers
    (scan, the pre-create probe) can skip the volume.
    """
    try:
        volume = pool.storageVolLookupByName(name)
        info = volume.info()
        key = volume.key()
    except libvirt.libvirtError as exc:
        logger.error(
            "Error while looking up volume: %s: %s", name, describe_libvirt_error(exc)
        )
        return None

    return {
        "vdi": key,
        "content_id": "",
        "name_label": name,
        "name_description": "",
        "ty": "user",
        "metadata_of_pool": "",
        "is_a_snapshot": False,
        "snapshot_time": iso8601_of_timestamp(0),
        "snapshot_of": "",
        "read_only": False,
        "virtual_size": int(info[1]),
        "physical_utilisation": int(info[2]),
        "sm_config": {},
        "persistent": True,
    }


def build_volume_xml(name: str, capacity_bytes: int) -> str:
    return (
        "<volume>"
        "<name>{name}</name>"
        "<capacity unit=\"B\">{capacity}</capacity>"
        "</volume>"
    ).format(name=escape(name), capacity=int(capacity_bytes))


class LibvirtVdiOperations:
    """VDI (volume) operations against the pools of attached SRs."""

    def __init__(self, registry: AttachedSrRegistry, connections: LibvirtConnectionManager):
        self._registry = registry
        self._connections = connections

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------
    def create(self, sr: str, vdi_info: Dict[str, Any]) -> Dict[str, Any]:
        pool = self._registry.get(sr)
        name = vdi_info["name_label"] + VOLUME_SUFFIX

        if vdi_info_of_name(pool, name) is not None:
            unique = self.choose_volume_name(pool, name)
            logger.info("Rewriting name from %s to %s to guarantee uniqueness", name, unique)
            name = unique

        volume_xml = build_volume_xml(name, vdi_info["virtual_size"])
        call_libvirt(pool.createXML, volume_xml, 0)

        created = vdi_info_of_name(pool, name)
        if created is None:
            pool_name = _pool_name(pool)
            logger.critical(
                "Volume %s missing from pool %s immediately after creation", name, pool_name
            )
            raise VolumeCreationLostError(pool_name, name)
        logger.info("Created volume %s in SR %s", name, sr)
        return created

    def destroy(self, sr: str, vdi: str) -> None:
        self._registry.get(sr)
        conn = self._connections.resolve()
        volume = call_libvirt(conn.storageVolLookupByPath, vdi)
        delete_flags = getattr(libvirt, "VIR_STORAGE_VOL_DELETE_NORMAL", 0)
        call_libvirt(volume.delete, delete_flags)
        logger.info("Deleted volume %s from SR %s", vdi, sr)

    def attach(self, dp: str, sr: str, vdi: str, read_write: bool) -> Dict[str, Any]:
        self._registry.get(sr)
        path = self.vdi_path_of(vdi)
        logger.debug("Attaching %s for %s at %s (read_write=%s)", vdi, dp, path, read_write)
        return {
            "params": path,
            "xenstore_data": {
                "type": "rbd",
                # some qemu versions look the disk up under this name
                "name": f"rbd:{vdi}",
            },
        }

    def detach(self, dp: str, sr: str, vdi: str) -> None:
        self._registry.get(sr)
        self.vdi_path_of(vdi)

    def activate(self, dp: str, sr: str, vdi: str) -> None:
        return None

    def deactivate(self, dp: str, sr: str, vdi: str) -> None:
        return None

    def unsupported(self, operation: UnsupportedVdiOperation) -> NoReturn:
        unsupported("VDI", operation)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def vdi_path_of(self, vdi: str) -> str:
        conn = self._connections.resolve()
        volume = call_libvirt(conn.storageVolLookupByKey, vdi)
        xml_desc = call_libvirt(volume.XMLDesc, 0)
        return read_xml_path(xml_desc, VOLUME_TARGET_PATH)

    @staticmethod
    def choose_volume_name(pool: "libvirt.virStoragePool", name: str) -> str:
        existing: List[str] = call_libvirt(pool.listVolumes) or []
        return choose_name(name, existing)

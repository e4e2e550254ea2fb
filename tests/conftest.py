import sys
import types
import xml.etree.ElementTree as ET
from unittest import mock

import pytest


def _build_libvirt_double():
    """Module double carrying the few libvirt names the connector touches."""
    double = types.ModuleType("libvirt")

    class libvirtError(Exception):
        def get_error_message(self):
            return str(self)

    double.libvirtError = libvirtError
    double.VIR_STORAGE_VOL_DELETE_NORMAL = 0
    double.virConnect = type("virConnect", (), {})
    double.virStoragePool = type("virStoragePool", (), {})
    double.virStorageVol = type("virStorageVol", (), {})
    double.open = mock.Mock(name="libvirt.open", side_effect=libvirtError("no hypervisor under test"))
    return double


# The binding needs the libvirt C library to build; without it the suite runs
# against a double so the connector modules still import.
try:
    import libvirt  # noqa: F401
except ImportError:
    sys.modules["libvirt"] = _build_libvirt_double()


def _libvirt_error(message):
    import libvirt

    return libvirt.libvirtError(message)


VOLUME_XML = """
<volume>
  <name>{name}</name>
  <key>{key}</key>
  <capacity unit='bytes'>{capacity}</capacity>
  <allocation unit='bytes'>{allocation}</allocation>
  <target>
    <path>{path}</path>
    <format type='unknown'/>
  </target>
</volume>
"""


class FakeVolume:
    def __init__(self, pool, name, capacity, allocation=0):
        self.pool = pool
        self._name = name
        self.capacity = capacity
        self.allocation = allocation
        self.deleted_with = None

    @property
    def path(self):
        return f"rbd:{self.pool.name()}/{self._name}"

    def name(self):
        return self._name

    def key(self):
        return f"{self.pool.name()}/{self._name}"

    def info(self):
        return [0, self.capacity, self.allocation]

    def XMLDesc(self, flags=0):
        return VOLUME_XML.format(
            name=self._name,
            key=self.key(),
            capacity=self.capacity,
            allocation=self.allocation,
            path=self.path,
        )

    def delete(self, flags=0):
        self.deleted_with = flags
        self.pool.volumes.pop(self._name, None)


class FakePool:
    def __init__(self, name, volume_names=()):
        self._name = name
        self.volumes = {}
        self.created_xml = []
        self.broken = set()
        for volume_name in volume_names:
            self.add_volume(volume_name, 1024)

    def add_volume(self, name, capacity, allocation=0):
        volume = FakeVolume(self, name, capacity, allocation)
        self.volumes[name] = volume
        return volume

    def name(self):
        return self._name

    def listVolumes(self):
        return list(self.volumes)

    def storageVolLookupByName(self, name):
        if name in self.broken or name not in self.volumes:
            raise _libvirt_error(f"Storage volume not found: no storage vol with matching name '{name}'")
        return self.volumes[name]

    def createXML(self, xml_desc, flags=0):
        self.created_xml.append(xml_desc)
        root = ET.fromstring(xml_desc)
        name = root.findtext("name")
        if name in self.volumes:
            raise _libvirt_error(f"storage volume '{name}' exists already")
        return self.add_volume(name, int(root.findtext("capacity")))


class FakeConnection:
    def __init__(self, uri=None, pools=None):
        self.uri = uri
        self.pools = dict(pools or {})
        self.closed = False
        self.created_pool_xml = []

    def _volumes(self):
        for pool in self.pools.values():
            yield from pool.volumes.values()

    def storagePoolLookupByName(self, name):
        if name not in self.pools:
            raise _libvirt_error(f"Storage pool not found: no storage pool with matching name '{name}'")
        return self.pools[name]

    def storagePoolCreateXML(self, xml_desc, flags=0):
        self.created_pool_xml.append(xml_desc)
        name = ET.fromstring(xml_desc).findtext("name")
        pool = FakePool(name)
        self.pools[name] = pool
        return pool

    def storageVolLookupByPath(self, path):
        for volume in self._volumes():
            if volume.path == path or volume.key() == path:
                return volume
        raise _libvirt_error(f"Storage volume not found: no storage vol with matching path '{path}'")

    def storageVolLookupByKey(self, key):
        for volume in self._volumes():
            if volume.key() == key:
                return volume
        raise _libvirt_error(f"Storage volume not found: no storage vol with matching key '{key}'")

    def close(self):
        self.closed = True
        return 0


class RecordingOpener:
    """Stands in for ``libvirt.open`` and remembers every connection it hands out."""

    def __init__(self, pools=None):
        self.pools = pools if pools is not None else {}
        self.calls = []
        self.connections = []

    def __call__(self, uri=None):
        self.calls.append(uri)
        conn = FakeConnection(uri, self.pools)
        conn.pools = self.pools
        self.connections.append(conn)
        return conn


@pytest.fixture
def pool():
    return FakePool("images", ["base.img"])


@pytest.fixture
def opener(pool):
    return RecordingOpener({pool.name(): pool, "backup": FakePool("backup")})


@pytest.fixture
def connector(opener):
    from sm_libvirt.libvirt.connector import LibvirtStorageConnector

    return LibvirtStorageConnector(opener=opener)

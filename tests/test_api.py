import logging

import pytest
from fastapi.testclient import TestClient

from sm_libvirt import deps
from sm_libvirt.core.config import APP_NAME
from sm_libvirt.libvirt.query import STATE_PATH
from sm_libvirt.main import app


@pytest.fixture
def client(connector, monkeypatch):
    monkeypatch.setattr(deps, "_connector", connector)
    return TestClient(app)


def attach(client, sr="sr1", name="images"):
    return client.post(f"/api/sr/{sr}/attach", json={"device_config": {"name": name}})


def test_query(client):
    response = client.get("/api/query")
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "sm-libvirt"
    assert body["driver"] == "libvirt"
    assert body["required_api_version"] == "2.0"
    assert body["features"] == [
        "VDI_CREATE",
        "VDI_DELETE",
        "VDI_ATTACH",
        "VDI_DETACH",
        "VDI_ACTIVATE",
        "VDI_DEACTIVATE",
    ]
    assert set(body["configuration"]) == {"xml", "name", "uri"}


def test_state_path():
    assert STATE_PATH == "/var/run/nonpersistent/sm-libvirt.json"


def test_startup_logs_default_uri(connector, monkeypatch, caplog):
    monkeypatch.setattr(deps, "_connector", connector)
    app_logger = logging.getLogger(APP_NAME)
    app_logger.addHandler(caplog.handler)
    try:
        with caplog.at_level(logging.INFO, logger=APP_NAME):
            with TestClient(app):
                pass
    finally:
        app_logger.removeHandler(caplog.handler)
    assert "SRs without a device_config uri will connect to" in caplog.text


def test_diagnostics(client):
    assert client.get("/api/query/diagnostics").json() == {"diagnostics": "Not available"}


def test_healthz_reports_attachment_state(client):
    assert client.get("/api/health/healthz").json()["details"]["attached_srs"] == 0
    attach(client)
    details = client.get("/api/health/healthz").json()["details"]
    assert details["attached_srs"] == 1
    assert details["connected"] is True


def test_attach_and_detach(client, connector):
    assert attach(client).status_code == 200
    assert "sr1" in connector.registry

    response = attach(client)
    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "Sr_attached"
    assert response.json()["detail"]["params"] == ["sr1"]

    assert client.post("/api/sr/sr1/detach").status_code == 200
    response = client.post("/api/sr/sr1/detach")
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "Sr_not_attached"


def test_attach_missing_name(client):
    response = client.post("/api/sr/sr1/attach", json={"device_config": {}})
    assert response.status_code == 400
    assert response.json()["detail"]["params"] == ["name"]


def test_attach_unknown_pool(client):
    response = attach(client, name="nosuchpool")
    assert response.status_code == 502
    detail = response.json()["detail"]
    assert detail["code"] == "Backend_error"
    assert detail["params"][0] == "libvirt"


def test_create_sr(client, opener):
    response = client.post(
        "/api/sr/sr2/create",
        json={"device_config": {"name": "fresh", "xml": ""}, "physical_size": 1 << 30},
    )
    assert response.status_code == 200
    assert "fresh" in opener.pools


def test_vdi_lifecycle(client, pool):
    attach(client)
    response = client.post("/api/sr/sr1/vdi", json={"name_label": "disk1", "virtual_size": 4096})
    assert response.status_code == 200
    record = response.json()
    assert record["name_label"] == "disk1.img"
    assert record["virtual_size"] == 4096

    second = client.post("/api/sr/sr1/vdi", json={"name_label": "disk1", "virtual_size": 4096})
    assert second.json()["name_label"] == "disk1.img.1"

    scanned = client.get("/api/sr/sr1/scan").json()
    assert {vdi["name_label"] for vdi in scanned} == {"base.img", "disk1.img", "disk1.img.1"}

    body = {"dp": "dp1", "vdi": record["vdi"], "read_write": True}
    attached = client.post("/api/sr/sr1/vdi/attach", json=body).json()
    assert attached["params"] == "rbd:images/disk1.img"
    assert attached["xenstore_data"]["type"] == "rbd"

    body = {"dp": "dp1", "vdi": record["vdi"]}
    for action in ("activate", "deactivate", "detach", "destroy"):
        assert client.post(f"/api/sr/sr1/vdi/{action}", json=body).status_code == 200
    assert "disk1.img" not in pool.volumes


def test_vdi_against_unattached_sr(client):
    response = client.post("/api/sr/sr1/vdi", json={"name_label": "disk1", "virtual_size": 1})
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "Sr_not_attached"


def test_vdi_create_lost_volume_fails_hard(client, pool):
    attach(client)
    pool.createXML = lambda xml_desc, flags=0: None
    strict = TestClient(app, raise_server_exceptions=False)
    response = strict.post("/api/sr/sr1/vdi", json={"name_label": "ghost", "virtual_size": 1})
    assert response.status_code == 500
    assert "ghost.img" not in pool.volumes


@pytest.mark.parametrize("operation", ["clone", "snapshot", "resize", "compose", "get_url"])
def test_unsupported_vdi_operations(client, opener, operation):
    response = client.post(f"/api/sr/sr1/vdi/{operation}")
    assert response.status_code == 501
    assert response.json()["detail"]["params"] == [f"VDI.{operation}"]
    assert opener.calls == []


def test_unknown_vdi_operation_is_rejected(client):
    assert client.post("/api/sr/sr1/vdi/teleport").status_code == 422


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/api/sr"),
        ("post", "/api/sr/sr1/destroy"),
        ("get", "/api/sr/sr1/stat"),
        ("post", "/api/sr/sr1/reset"),
    ],
)
def test_unsupported_sr_operations(client, method, path):
    response = getattr(client, method)(path)
    assert response.status_code == 501
    assert response.json()["detail"]["code"] == "Unimplemented"

from typing import Dict

from fastapi import APIRouter
from pydantic import BaseModel

from sm_libvirt.deps import get_connector
from sm_libvirt.libvirt.query import UnsupportedVdiOperation

from .common import call_storage_operation, logger

router = APIRouter(prefix="/sr/{sr}/vdi", tags=["VDI"])


class VdiInfoModel(BaseModel):
    vdi: str = ""
    content_id: str = ""
    name_label: str
    name_description: str = ""
    ty: str = "user"
    metadata_of_pool: str = ""
    is_a_snapshot: bool = False
    snapshot_time: str = "19700101T00:00:00Z"
    snapshot_of: str = ""
    read_only: bool = False
    virtual_size: int
    physical_utilisation: int = 0
    sm_config: Dict[str, str] = {}
    persistent: bool = True


class VdiRequest(BaseModel):
    dp: str = ""
    vdi: str


class VdiAttachRequest(VdiRequest):
    read_write: bool = False


class VdiAttachResponse(BaseModel):
    params: str
    xenstore_data: Dict[str, str]


class VdiActionResponse(BaseModel):
    sr: str
    vdi: str
    ok: bool = True


@router.post("", response_model=VdiInfoModel)
def create_vdi(sr: str, vdi_info: VdiInfoModel):
    connector = get_connector()
    logger.info("Creating VDI %s (%d bytes) in SR %s", vdi_info.name_label, vdi_info.virtual_size, sr)
    return call_storage_operation(
        lambda: connector.vdi.create(sr, vdi_info.model_dump()), sr=sr
    )


@router.post("/destroy", response_model=VdiActionResponse)
def destroy_vdi(sr: str, request: VdiRequest):
    connector = get_connector()
    call_storage_operation(lambda: connector.vdi.destroy(sr, request.vdi), sr=sr)
    return {"sr": sr, "vdi": request.vdi}


@router.post("/attach", response_model=VdiAttachResponse)
def attach_vdi(sr: str, request: VdiAttachRequest):
    connector = get_connector()
    return call_storage_operation(
        lambda: connector.vdi.attach(request.dp, sr, request.vdi, request.read_write),
        sr=sr,
    )


@router.post("/detach", response_model=VdiActionResponse)
def detach_vdi(sr: str, request: VdiRequest):
    connector = get_connector()
    call_storage_operation(lambda: connector.vdi.detach(request.dp, sr, request.vdi), sr=sr)
    return {"sr": sr, "vdi": request.vdi}


@router.post("/activate", response_model=VdiActionResponse)
def activate_vdi(sr: str, request: VdiRequest):
    connector = get_connector()
    call_storage_operation(lambda: connector.vdi.activate(request.dp, sr, request.vdi), sr=sr)
    return {"sr": sr, "vdi": request.vdi}


@router.post("/deactivate", response_model=VdiActionResponse)
def deactivate_vdi(sr: str, request: VdiRequest):
    connector = get_connector()
    call_storage_operation(lambda: connector.vdi.deactivate(request.dp, sr, request.vdi), sr=sr)
    return {"sr": sr, "vdi": request.vdi}


@router.post("/{operation}")
def unsupported_vdi_operation(sr: str, operation: UnsupportedVdiOperation):
    connector = get_connector()
    return call_storage_operation(lambda: connector.vdi.unsupported(operation), sr=sr)


__all__ = ["router"]

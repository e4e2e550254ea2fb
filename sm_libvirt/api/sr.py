from typing import Dict, List

from fastapi import APIRouter
from pydantic import BaseModel

from sm_libvirt.deps import get_connector
from sm_libvirt.libvirt.query import UnsupportedSrOperation

from .common import call_storage_operation
from .vdi import VdiInfoModel

router = APIRouter(prefix="/sr", tags=["SR"])


class SrAttachRequest(BaseModel):
    device_config: Dict[str, str] = {}


class SrCreateRequest(BaseModel):
    device_config: Dict[str, str] = {}
    physical_size: int = 0


class SrActionResponse(BaseModel):
    sr: str
    ok: bool = True


@router.get("")
def list_srs():
    connector = get_connector()
    return call_storage_operation(
        lambda: connector.sr.unsupported(UnsupportedSrOperation.LIST), sr=""
    )


@router.post("/{sr}/attach", response_model=SrActionResponse)
def attach_sr(sr: str, request: SrAttachRequest):
    connector = get_connector()
    call_storage_operation(lambda: connector.sr.attach(sr, request.device_config), sr=sr)
    return {"sr": sr}


@router.post("/{sr}/create", response_model=SrActionResponse)
def create_sr(sr: str, request: SrCreateRequest):
    connector = get_connector()
    call_storage_operation(
        lambda: connector.sr.create(sr, request.device_config, request.physical_size),
        sr=sr,
    )
    return {"sr": sr}


@router.post("/{sr}/detach", response_model=SrActionResponse)
def detach_sr(sr: str):
    connector = get_connector()
    call_storage_operation(lambda: connector.sr.detach(sr), sr=sr)
    return {"sr": sr}


@router.get("/{sr}/scan", response_model=List[VdiInfoModel])
def scan_sr(sr: str):
    connector = get_connector()
    return call_storage_operation(lambda: connector.sr.scan(sr), sr=sr)


@router.post("/{sr}/destroy")
def destroy_sr(sr: str):
    connector = get_connector()
    return call_storage_operation(
        lambda: connector.sr.unsupported(UnsupportedSrOperation.DESTROY), sr=sr
    )


@router.get("/{sr}/stat")
def stat_sr(sr: str):
    connector = get_connector()
    return call_storage_operation(
        lambda: connector.sr.unsupported(UnsupportedSrOperation.STAT), sr=sr
    )


@router.post("/{sr}/reset")
def reset_sr(sr: str):
    connector = get_connector()
    return call_storage_operation(
        lambda: connector.sr.unsupported(UnsupportedSrOperation.RESET), sr=sr
    )


__all__ = ["router"]

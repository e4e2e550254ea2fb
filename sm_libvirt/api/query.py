from typing import Dict, List

from fastapi import APIRouter
from pydantic import BaseModel

from sm_libvirt.deps import get_connector

router = APIRouter(prefix="/query", tags=["Query"])


class QueryResponse(BaseModel):
    driver: str
    name: str
    description: str
    vendor: str
    copyright: str
    version: str
    required_api_version: str
    features: List[str]
    configuration: Dict[str, str]


@router.get("", response_model=QueryResponse)
def query():
    """Capabilities and recognised device_config keys of this connector."""
    return get_connector().query()


@router.get("/diagnostics")
def diagnostics():
    return {"diagnostics": get_connector().diagnostics()}


__all__ = ["router"]

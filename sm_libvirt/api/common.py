import logging
from typing import Callable, TypeVar

from fastapi import HTTPException

from sm_libvirt.libvirt.errors import (
    BackendError,
    MissingConfigurationParameterError,
    SrAttachedError,
    SrNotAttachedError,
    StorageError,
    UnimplementedError,
    XmlPathNotFoundError,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

_STATUS_CODES = {
    SrNotAttachedError: 404,
    SrAttachedError: 409,
    MissingConfigurationParameterError: 400,
    XmlPathNotFoundError: 404,
    UnimplementedError: 501,
    BackendError: 502,
}


def status_for(exc: StorageError) -> int:
    for error_type, status_code in _STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return 500


def error_detail(exc: StorageError) -> dict:
    return {"code": exc.code, "params": exc.params, "message": str(exc)}


def call_storage_operation(operation: Callable[[], T], *, sr: str) -> T:
    try:
        return operation()
    except StorageError as exc:
        status_code = status_for(exc)
        if status_code >= 500 and status_code != 501:
            logger.error("Storage operation on SR %s failed: %s", sr, exc)
        raise HTTPException(status_code=status_code, detail=error_detail(exc))


__all__ = [
    "logger",
    "T",
    "status_for",
    "error_detail",
    "call_storage_operation",
]

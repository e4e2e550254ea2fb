"""Translation of native libvirt failures into typed backend errors."""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

import libvirt

from .errors import BackendError

logger = logging.getLogger(__name__)

T = TypeVar("T")

BACKEND_NAME = "libvirt"


def describe_libvirt_error(exc: "libvirt.libvirtError") -> str:
    message = None
    get_message = getattr(exc, "get_error_message", None)
    if callable(get_message):
        message = get_message()
    return message or str(exc)


def call_libvirt(operation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a libvirt call, re-raising its native error as BackendError.

    Anything other than ``libvirt.libvirtError`` propagates untouched.
    """
    try:
        return operation(*args, **kwargs)
    except libvirt.libvirtError as exc:
        message = describe_libvirt_error(exc)
        logger.error("from libvirt: %s", message)
        raise BackendError(BACKEND_NAME, [message]) from exc

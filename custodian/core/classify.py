"""Disposer classification and failure-isolated disposal."""

from __future__ import annotations

import abc
import logging
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class DisposerKind(Enum):
    """Operation used to release a resource."""

    ACTION = "action"
    DISCONNECT = "disconnect"
    DESTROY = "destroy"
    UNSUPPORTED = "unsupported"


class ConnectionHandle(abc.ABC):
    """Marker for host-native connection or subscription handles.

    Host code registers its handle types with ``ConnectionHandle.register``
    so that their ``disconnect`` takes priority over any ``destroy`` method
    the same object might expose.
    """

    @abc.abstractmethod
    def disconnect(self) -> None:
        """Release the connection."""


def _has_method(value: Any, name: str) -> bool:
    return callable(getattr(value, name, None))


def classify(value: Any) -> DisposerKind:
    """Decide how a value would be disposed.

    Parameters
    ----------
    value : Any
        Candidate resource

    Returns
    -------
    DisposerKind
        ACTION for callables, DISCONNECT for connection handles, DESTROY for
        objects with a ``destroy()`` method, DISCONNECT for other objects with
        a ``disconnect()`` method, UNSUPPORTED otherwise
    """
    if callable(value):
        return DisposerKind.ACTION

    if isinstance(value, ConnectionHandle) and _has_method(value, "disconnect"):
        return DisposerKind.DISCONNECT

    if _has_method(value, "destroy"):
        return DisposerKind.DESTROY

    if _has_method(value, "disconnect"):
        return DisposerKind.DISCONNECT

    return DisposerKind.UNSUPPORTED


def describe_unsupported(value: Any) -> str:
    """Build the error message for a value that cannot be disposed.

    Parameters
    ----------
    value : Any
        Value rejected by classify()

    Returns
    -------
    str
        Message naming the offending shape
    """
    type_name = type(value).__name__

    if hasattr(value, "__dict__") or hasattr(type(value), "__slots__"):
        return (
            f"Received {type_name} as cleanup resource, but couldn't detect "
            f"a destroy() or disconnect() method"
        )

    return f"Cleanup of type '{type_name}' not supported"


def dispose_resource(resource: Any, *args: Any) -> bool:
    """Dispose of a resource, logging instead of raising on failure.

    Parameters
    ----------
    resource : Any
        Resource to release
    *args : Any
        Extra arguments, forwarded to plain callables only

    Returns
    -------
    bool
        True if the disposer ran without raising
    """
    kind = classify(resource)

    if kind is DisposerKind.UNSUPPORTED:
        logger.warning(
            "Ignoring resource that cannot be disposed: %s",
            describe_unsupported(resource),
            extra={"disposer_kind": kind.value},
        )
        return False

    try:
        if kind is DisposerKind.ACTION:
            resource(*args)
        elif kind is DisposerKind.DESTROY:
            resource.destroy()
        else:
            resource.disconnect()
    except Exception as e:
        logger.exception(
            "Error disposing %r: %s",
            resource,
            e,
            extra={"disposer_kind": kind.value},
        )
        return False

    logger.debug("Disposed %r", resource, extra={"disposer_kind": kind.value})
    return True

"""Core custodian functionality."""

from __future__ import annotations

from custodian.core.classify import (
    ConnectionHandle,
    DisposerKind,
    classify,
    dispose_resource,
)
from custodian.core.dispatcher import (
    DeferredDispatcher,
    defer_dispose,
    get_dispatcher,
    set_dispatcher,
)
from custodian.core.registry import Registry, Token

__all__ = [
    "ConnectionHandle",
    "DeferredDispatcher",
    "DisposerKind",
    "Registry",
    "Token",
    "classify",
    "defer_dispose",
    "dispose_resource",
    "get_dispatcher",
    "set_dispatcher",
]

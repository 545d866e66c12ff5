"""custodian - deterministic release of callbacks, connections and handles."""

from __future__ import annotations

from custodian.core import (
    ConnectionHandle,
    DeferredDispatcher,
    DisposerKind,
    Registry,
    Token,
    classify,
    defer_dispose,
    dispose_resource,
    get_dispatcher,
    set_dispatcher,
)
from custodian.exceptions import (
    CustodianError,
    InvalidUnlockKeyError,
    RegistryLockedError,
    UnsupportedResourceKindError,
)

__version__ = "0.1.0"

__all__ = [
    "ConnectionHandle",
    "CustodianError",
    "DeferredDispatcher",
    "DisposerKind",
    "InvalidUnlockKeyError",
    "Registry",
    "RegistryLockedError",
    "Token",
    "UnsupportedResourceKindError",
    "classify",
    "defer_dispose",
    "dispose_resource",
    "get_dispatcher",
    "set_dispatcher",
]

"""Registry of disposable resources and their ownership tokens."""

from __future__ import annotations

import logging
import threading
import types
from typing import Any

from custodian.core.classify import (
    DisposerKind,
    classify,
    describe_unsupported,
    dispose_resource,
)
from custodian.core.dispatcher import get_dispatcher
from custodian.exceptions import (
    InvalidUnlockKeyError,
    RegistryLockedError,
    UnsupportedResourceKindError,
)

logger = logging.getLogger(__name__)


class Token:
    """Ownership handle for one resource held by a Registry.

    Tokens are created by ``Registry.add``. Releasing a token, by
    forgetting or disposing it, removes it from its registry; both are
    terminal and a second call does nothing.

    Parameters
    ----------
    registry : Registry
        Registry the token belongs to
    resource : Any
        Resource to dispose
    """

    __slots__ = ("_registry", "_resource", "_released")

    def __init__(self, registry: Registry, resource: Any) -> None:
        self._registry = registry
        self._resource = resource
        self._released = False

    def __repr__(self) -> str:
        state = "released" if self._released else repr(self._resource)
        return f"<Token {state}>"

    @property
    def registry(self) -> Registry:
        """Registry the token belongs to."""
        return self._registry

    @property
    def is_released(self) -> bool:
        """Whether the token was forgotten or disposed."""
        return self._released

    def _release(self) -> tuple[bool, Any]:
        with self._registry._lock:
            if self._released:
                return False, None

            resource = self._resource
            self._released = True
            self._resource = None
            self._registry._tokens.discard(self)

        return True, resource

    def forget(self) -> None:
        """Drop the resource without disposing of it."""
        released, resource = self._release()
        if released:
            logger.debug("Forgot %r", resource)

    def dispose(self, *args: Any) -> None:
        """Dispose of the resource on the calling thread.

        Parameters
        ----------
        *args : Any
            Extra arguments forwarded to a callable resource
        """
        released, resource = self._release()
        if released:
            dispose_resource(resource, *args)

    def dispose_deferred(self, *args: Any) -> None:
        """Hand the resource to the process-wide dispatcher for disposal.

        Parameters
        ----------
        *args : Any
            Extra arguments forwarded to a callable resource
        """
        dispatcher = get_dispatcher()
        released, resource = self._release()
        if released:
            dispatcher.enqueue(resource, *args)


class Registry:
    """Accumulates disposable resources and releases each exactly once.

    A registry starts active. ``cleanup`` disposes everything registered and
    moves it to the cleaned state, after which ``add`` disposes resources
    immediately instead of holding them. A registry created with a key
    refuses ``cleanup`` until ``unlock`` is called with the same key.

    Supported resources are callables, objects with ``destroy()`` and
    objects with ``disconnect()``. A registry is itself destroyable, so
    registries can be nested.

    Parameters
    ----------
    key : Any
        Optional lock key; None means unlocked
    """

    def __init__(self, key: Any = None) -> None:
        self._tokens: set[Token] = set()
        self._active = True
        self._key = key
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        state = "active" if self._active else "cleaned"
        locked = " locked" if self._key is not None else ""
        return f"<Registry {state}{locked} tokens={len(self._tokens)}>"

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._tokens

    def __enter__(self) -> Registry:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        if exc is not None and self.is_locked:
            logger.debug("Skipping cleanup of locked registry after %r", exc)
            return

        self.cleanup()

    @property
    def is_locked(self) -> bool:
        """Whether cleanup is blocked by a lock key."""
        with self._lock:
            return self._key is not None

    def is_active(self) -> bool:
        """Check whether cleanup has not run yet.

        Returns
        -------
        bool
            True until cleanup succeeds
        """
        with self._lock:
            return self._active

    def add(self, resource: Any) -> Token | None:
        """Register a resource for disposal.

        Parameters
        ----------
        resource : Any
            Callable, or object with a destroy() or disconnect() method

        Returns
        -------
        Token | None
            Token owning the resource, or None if the registry was already
            cleaned up and the resource was disposed immediately

        Raises
        ------
        UnsupportedResourceKindError
            If the resource cannot be disposed by any known operation
        """
        with self._lock:
            if self._active:
                if classify(resource) is DisposerKind.UNSUPPORTED:
                    raise UnsupportedResourceKindError(
                        describe_unsupported(resource),
                        resource_type=type(resource).__name__,
                    )

                token = Token(self, resource)
                self._tokens.add(token)
                logger.debug("Registered %r", resource)
                return token

        logger.debug("Registry already cleaned up, disposing %r immediately", resource)
        dispose_resource(resource)
        return None

    def cleanup(self, *args: Any) -> None:
        """Dispose of every registered resource.

        Extra arguments are accepted but not forwarded: bulk cleanup calls
        each disposer without arguments. Use ``Token.dispose`` to pass them.

        Raises
        ------
        RegistryLockedError
            If the registry holds a lock key
        """
        with self._lock:
            if self._key is not None:
                raise RegistryLockedError("cleanup() is locked for this registry")

            self._active = False
            tokens = list(self._tokens)

        logger.debug("Cleaning up %d resources", len(tokens))

        for token in tokens:
            token.dispose()

    def destroy(self) -> None:
        """Alias of cleanup() so a registry can be added to another."""
        self.cleanup()

    def unlock(self, key: Any) -> None:
        """Remove the lock key, allowing cleanup.

        Parameters
        ----------
        key : Any
            Key the registry was created with

        Raises
        ------
        InvalidUnlockKeyError
            If the registry is locked with a different key
        """
        with self._lock:
            if self._key is None:
                return

            if self._key != key:
                raise InvalidUnlockKeyError("Invalid lock key")

            self._key = None

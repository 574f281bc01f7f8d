from __future__ import annotations

import inspect
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    ParamSpec,
    TypeVar,
    cast,
    overload,
)

from ._conformance import validate_impl, validate_instance
from ._errors import ResolutionError
from ._product import Cloneable
from ._prototype import apply_changes
from ._singleton import SingletonCell


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable

    T = TypeVar("T")
    # Parameter spec for factories
    P = ParamSpec("P")

    Token = type[T] | str


class Lifetime(Enum):
    SINGLETON = "singleton"
    TRANSIENT = "transient"
    PROTOTYPE = "prototype"


@dataclass
class Registration:
    factory: Callable[..., object] | None
    impl: type | None
    lifetime: Lifetime
    cell: SingletonCell[object] | None = None  # singleton lifetime
    template: Cloneable | None = None  # prototype lifetime


class Provisioner:
    """One entry point for every way of providing an object.

    - register classes or factories under a token (a type or a string)
    - lifetimes: singleton / transient / prototype
    - optional scoping.

    Nothing is auto-wired: factories receive the provisioner and pull their
    own collaborators from it.
    """

    def __init__(self) -> None:
        self._registrations: dict[Any, Registration] = {}
        self._lock = threading.RLock()

    @overload
    def register(
        self,
        token: type[T],
        impl: type[T],
        *,
        factory: None = ...,
        lifetime: Lifetime = Lifetime.TRANSIENT,
    ) -> None: ...

    @overload
    def register(
        self,
        token: type[T],
        impl: None = ...,
        *,
        factory: Callable[P, T],
        lifetime: Lifetime = Lifetime.TRANSIENT,
    ) -> None: ...

    @overload
    def register(
        self,
        token: str,
        impl: type | None = ...,
        *,
        factory: Callable[..., Any] | None = ...,
        lifetime: Lifetime = Lifetime.TRANSIENT,
    ) -> None: ...

    def register(
        self,
        token: Token[T],
        impl: type | None = None,
        *,
        factory: Callable[..., Any] | None = None,
        lifetime: Lifetime = Lifetime.TRANSIENT,
    ) -> None:
        """Register a concrete type or a factory for a token.

        Example:
          provisioner.register(Product, Circle)
          provisioner.register("db", factory=lambda p: Database(), lifetime=Lifetime.SINGLETON)
          provisioner.register("tile", factory=lambda p: Square(side=8), lifetime=Lifetime.PROTOTYPE)

        """
        if impl is not None and factory is not None:
            msg = "Provide either `impl` or `factory`, not both."
            raise ValueError(msg)

        if impl is None and factory is None:
            msg = "Either `impl` or `factory` must be provided."
            raise ValueError(msg)

        if impl is not None:  # noqa: SIM102
            # Only validate type tokens. Non-type tokens (like strings) cannot validate statically.
            if inspect.isclass(token):
                validate_impl(token, impl)

        reg = Registration(factory=factory, impl=impl, lifetime=lifetime)
        if lifetime is Lifetime.SINGLETON:
            reg.cell = SingletonCell(lambda: self._build(token, reg), name=repr(token))

        with self._lock:
            self._registrations[token] = reg
        logger.debug("Registered %r (%s)", token, lifetime.value)

    def register_instance(
        self,
        token: Token[T],
        instance: object,
        *,
        replace: bool = False,
    ) -> None:
        """Register a pre-built instance (always singleton)."""
        if inspect.isclass(token):
            validate_impl(token, type(instance))

        with self._lock:
            if not replace and token in self._registrations:
                msg = f"Token {token!r} is already registered. Pass replace=True to overwrite."
                raise KeyError(msg)
            reg = Registration(factory=None, impl=None, lifetime=Lifetime.SINGLETON)
            reg.cell = SingletonCell(lambda: instance, name=repr(token))
            reg.cell.get()
            self._registrations[token] = reg

    @overload
    def resolve(self, token: type[T], **kwargs: Any) -> T: ...

    @overload
    def resolve(self, token: str, **kwargs: Any) -> object: ...

    def resolve(self, token: Token[T], **kwargs: Any) -> object:
        """Provide an object for the token.

        `kwargs` reach the factory or constructor of transient and prototype
        registrations, and of a singleton only on its first creation. For
        prototypes they are applied to the clone as attribute changes.
        """
        with self._lock:
            reg = self._registrations.get(token)
        if reg is None:
            msg = f"No registration found for token: {token!r}"
            raise ResolutionError(msg)

        cell = reg.cell
        if cell is not None:
            if kwargs and not cell.is_ready:
                return cell._get_or_create(lambda: self._build(token, reg, **kwargs))  # noqa: SLF001
            return cell.get()

        if reg.lifetime is Lifetime.PROTOTYPE:
            with self._lock:
                if reg.template is None:
                    template = self._build(token, reg)
                    if not isinstance(template, Cloneable):
                        msg = f"Prototype for {token!r} ({type(template).__name__}) does not provide clone()"
                        raise TypeError(msg)
                    # private copy, never the object the factory handed out
                    reg.template = template.clone()
            return apply_changes(reg.template.clone(), kwargs)

        return self._build(token, reg, **kwargs)

    def is_registered(self, token: object) -> bool:
        return token in self._registrations

    def create_scope(self) -> Scope:
        """Create a scope that prefers its own registrations, falls back to parent."""
        return Scope(self, _from_parent=True)

    def _build(self, token: Token[T], reg: Registration, **kwargs: Any) -> object:
        if reg.factory is not None:
            instance = reg.factory(self, **kwargs)
        else:
            instance = cast("type", reg.impl)(**kwargs)

        # impl path was validated at register time
        if inspect.isclass(token) and reg.factory is not None:
            validate_instance(token, instance)

        return instance


class Scope(Provisioner):
    """A scoped provisioner that looks up in itself first, then falls back to a parent.

    Useful for per-request/per-test lifetimes without altering root registrations.
    """

    def __init__(self, parent: Provisioner, *, _from_parent: bool = False) -> None:
        if not _from_parent:
            msg = "Scope instances must be created via Provisioner.create_scope()"
            raise RuntimeError(msg)
        super().__init__()
        self._parent = parent

    @overload
    def resolve(self, token: type[T], **kwargs: Any) -> T: ...

    @overload
    def resolve(self, token: str, **kwargs: Any) -> object: ...

    def resolve(self, token: Token[T], **kwargs: Any) -> object:
        """Resolve locally registered tokens here, everything else from the parent."""
        with self._lock:
            reg = self._registrations.get(token)

        if not reg:
            return self._parent.resolve(token, **kwargs)

        return super().resolve(token, **kwargs)

    def is_registered(self, token: object) -> bool:
        return super().is_registered(token) or self._parent.is_registered(token)

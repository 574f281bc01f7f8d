"""Family (abstract) factories.

A family factory is bound to one family tag for its whole life and creates one
product per role. Every product it returns carries that tag; a factory whose
declared variants disagree on the tag fails when its class is defined.
"""

from __future__ import annotations

import inspect
import logging
import threading
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from ._errors import FamilyMismatch, UnsupportedVariant


if TYPE_CHECKING:
    from collections.abc import Mapping


logger = logging.getLogger(__name__)

F = TypeVar("F", bound="type[FamilyFactory]")


class FamilyFactory:
    """Base class for family factories.

    Subclasses set `family` and `products` (role -> variant class). Abstract
    intermediates (e.g. a base declaring role helpers) leave `family` unset and
    list the roles every bound subclass must cover in `required_roles`.
    """

    family: ClassVar[str]
    products: ClassVar[Mapping[str, type]] = {}
    required_roles: ClassVar[frozenset[str]] = frozenset()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        family = getattr(cls, "family", None)
        if family is None:
            return

        missing = cls.required_roles - set(cls.products)
        if missing:
            msg = f"{cls.__name__} (family {family!r}) has no variant for roles: {', '.join(sorted(missing))}"
            raise TypeError(msg)

        for role, variant in cls.products.items():
            tag = getattr(variant, "family", None)
            if tag != family:
                msg = (
                    f"{cls.__name__} is bound to family {family!r} but its {role!r} "
                    f"variant {variant.__name__} is tagged {tag!r}"
                )
                raise FamilyMismatch(msg)

    def __init__(self) -> None:
        if not hasattr(type(self), "family"):
            msg = f"{type(self).__name__} is not bound to a family"
            raise TypeError(msg)

    def __setattr__(self, name: str, value: object) -> None:
        if name in ("family", "products"):
            msg = f"{type(self).__name__}.{name} is fixed at class definition"
            raise AttributeError(msg)
        super().__setattr__(name, value)

    @classmethod
    def roles(cls) -> list[str]:
        return list(cls.products)

    def create(self, role: str, **kwargs: Any) -> Any:
        """Build the variant for 'role' in this factory's family."""
        try:
            variant = self.products[role]
        except KeyError:
            msg = f"{type(self).__name__} has no {role!r} role. Available: {self.roles()}"
            raise UnsupportedVariant(msg) from None

        product = variant(**kwargs)
        tag = getattr(product, "family", None)
        if tag != self.family:
            msg = f"{type(self).__name__} ({self.family!r}) produced a {role!r} tagged {tag!r}"
            raise FamilyMismatch(msg)
        return product


class FamilyRegistry:
    """Explicit family-name -> factory class map.

    Factories are added by calling `register` (also usable as a class decorator);
    nothing is discovered implicitly.
    """

    def __init__(self) -> None:
        self._factories: dict[str, type[FamilyFactory]] = {}
        self._lock = threading.RLock()

    def register(self, factory_cls: F, *, replace: bool = False) -> F:
        if not (inspect.isclass(factory_cls) and issubclass(factory_cls, FamilyFactory)):
            msg = f"{factory_cls!r} is not a FamilyFactory subclass"
            raise TypeError(msg)

        family = getattr(factory_cls, "family", None)
        if family is None:
            msg = f"{factory_cls.__name__} is not bound to a family"
            raise ValueError(msg)

        with self._lock:
            if not replace and family in self._factories:
                msg = f"Family {family!r} is already registered. Pass replace=True to overwrite."
                raise KeyError(msg)
            self._factories[family] = factory_cls
        logger.debug("Registered family %r -> %s", family, factory_cls.__name__)
        return factory_cls

    def create(self, family: str) -> FamilyFactory:
        """Return a new factory bound to 'family'."""
        with self._lock:
            factory_cls = self._factories.get(family)
        if factory_cls is None:
            msg = f"Unsupported family {family!r}. Available: {self.families()}"
            raise UnsupportedVariant(msg)
        return factory_cls()

    def families(self) -> list[str]:
        with self._lock:
            return sorted(self._factories)

    def __contains__(self, family: object) -> bool:
        return family in self._factories

from __future__ import annotations

import enum
import inspect
import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar, cast

from ._conformance import validate_impl, validate_instance
from ._errors import UnsupportedVariant


if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterable, Mapping


logger = logging.getLogger(__name__)

K = TypeVar("K")


@dataclass(frozen=True)
class Variant:
    factory: Callable[..., object] | None
    impl: type | None

    def build(self, **kwargs: Any) -> object:
        if self.impl is not None:
            return self.impl(**kwargs)
        return cast("Callable[..., object]", self.factory)(**kwargs)


class KeyedFactory(Generic[K]):
    """Map a discriminator to exactly one product constructor.

    - every `create` call returns a fresh instance (no caching)
    - unknown discriminators raise `UnsupportedVariant`
    - `product_type` is the capability each product must satisfy
    - `keys` (an Enum class or iterable) closes the set of discriminators.
    """

    def __init__(
        self,
        constructors: Mapping[K, type | Callable[..., object]] | None = None,
        *,
        product_type: type | None = None,
        keys: type[enum.Enum] | Iterable[K] | None = None,
    ) -> None:
        self._variants: dict[Any, Variant] = {}
        self._product_type = product_type
        self._lock = threading.RLock()
        self._sealed = False

        self._key_enum: type[enum.Enum] | None = None
        self._allowed: frozenset[Hashable] | None = None
        if inspect.isclass(keys) and issubclass(keys, enum.Enum):
            self._key_enum = keys
            self._allowed = frozenset(keys)
        elif keys is not None:
            self._allowed = frozenset(keys)

        for key, ctor in (constructors or {}).items():
            if inspect.isclass(ctor):
                self.register(key, ctor)
            else:
                self.register(key, factory=ctor)

    @property
    def product_type(self) -> type | None:
        return self._product_type

    @property
    def sealed(self) -> bool:
        return self._sealed

    def register(
        self,
        key: K,
        impl: type | None = None,
        *,
        factory: Callable[..., object] | None = None,
        replace: bool = False,
    ) -> None:
        """Map 'key' to a product class or a factory callable.

        Example:
          shapes.register(ShapeKind.CIRCLE, Circle)
          shapes.register("hexagon", factory=lambda **kw: Polygon(sides=6, **kw))

        """
        if impl is not None and factory is not None:
            msg = "Provide either `impl` or `factory`, not both."
            raise ValueError(msg)

        if impl is None and factory is None:
            msg = "Either `impl` or `factory` must be provided."
            raise ValueError(msg)

        if self._allowed is not None and key not in self._allowed:
            msg = f"Discriminator {key!r} is outside the closed set {sorted(map(repr, self._allowed))}"
            raise UnsupportedVariant(msg)

        if impl is not None and self._product_type is not None:
            validate_impl(self._product_type, impl)

        with self._lock:
            if self._sealed:
                msg = f"Factory is sealed; cannot register {key!r}"
                raise RuntimeError(msg)
            if not replace and key in self._variants:
                msg = f"Discriminator {key!r} is already registered. Pass replace=True to overwrite."
                raise KeyError(msg)
            self._variants[key] = Variant(factory=factory, impl=impl)
        logger.debug("Registered variant %r -> %s", key, getattr(impl or factory, "__qualname__", impl or factory))

    def seal(self) -> KeyedFactory[K]:
        """Freeze the mapping. An Enum-closed factory must map every member."""
        with self._lock:
            if self._key_enum is not None:
                missing = [m for m in self._key_enum if m not in self._variants]
                if missing:
                    msg = f"No constructor for {', '.join(repr(m) for m in missing)}"
                    raise ValueError(msg)
            self._sealed = True
        return self

    def create(self, key: K, **kwargs: Any) -> Any:
        """Construct a new product for 'key'."""
        try:
            variant = self._variants[key]
        except (KeyError, TypeError):
            msg = f"Unsupported variant {key!r}. Available: {self._describe_keys()}"
            raise UnsupportedVariant(msg) from None

        product = variant.build(**kwargs)

        if variant.factory is not None and self._product_type is not None:
            validate_instance(self._product_type, product)

        return product

    def keys(self) -> list[K]:
        with self._lock:
            return list(self._variants)

    def __contains__(self, key: object) -> bool:
        try:
            return key in self._variants
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._variants)

    def _describe_keys(self) -> str:
        return ", ".join(repr(k) for k in self.keys())

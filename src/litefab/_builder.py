"""Staged construction: builders with recorded steps and directors that replay recipes.

A builder moves EMPTY -> PARTIAL as steps run and reaches COMPLETE only when the
caller asks for the product. It does not check that any particular step ran:
a product taken after skipping steps keeps its defaults for those fields.
"""

from __future__ import annotations

import functools
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

from ._errors import RecipeNotFound, UnsupportedVariant


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping


logger = logging.getLogger(__name__)

P = TypeVar("P")


class BuildState(Enum):
    EMPTY = "empty"
    PARTIAL = "partial"
    COMPLETE = "complete"


def step(step_id: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Mark a builder method as the step 'step_id'.

    The wrapped method records the step and returns the builder, so steps chain.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(self: Builder[Any], *args: Any, **kwargs: Any) -> Any:
            self._begin()
            func(self, *args, **kwargs)
            self._steps_done.add(step_id)
            return self

        wrapper.step_id = step_id  # type: ignore[attr-defined]
        return wrapper

    return decorator


class Builder(ABC, Generic[P]):
    """Base for staged builders.

    Subclasses implement `_new_product` and decorate their steps with `@step`.
    A builder is owned by one caller at a time.
    """

    _step_methods: ClassVar[dict[str, str]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        steps: dict[str, str] = {}
        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                step_id = getattr(attr, "step_id", None)
                if step_id is not None:
                    steps[step_id] = name
        cls._step_methods = steps

    def __init__(self) -> None:
        self._product: P | None = None
        self._steps_done: set[str] = set()
        self._complete = False

    @abstractmethod
    def _new_product(self) -> P: ...

    @classmethod
    def steps(cls) -> list[str]:
        return list(cls._step_methods)

    @property
    def state(self) -> BuildState:
        if self._complete:
            return BuildState.COMPLETE
        if self._steps_done:
            return BuildState.PARTIAL
        return BuildState.EMPTY

    @property
    def steps_done(self) -> frozenset[str]:
        return frozenset(self._steps_done)

    def reset(self) -> None:
        """Discard any work in progress."""
        self._product = None
        self._steps_done = set()
        self._complete = False

    def apply(self, step_id: str, *args: Any, **kwargs: Any) -> Builder[P]:
        """Run the step registered as 'step_id'."""
        try:
            name = self._step_methods[step_id]
        except KeyError:
            msg = f"{type(self).__name__} has no step {step_id!r}. Available: {self.steps()}"
            raise UnsupportedVariant(msg) from None
        return getattr(self, name)(*args, **kwargs)

    def get_product(self) -> P:
        """Hand the product over to the caller.

        Steps that never ran leave their fields at the product's defaults.
        The builder keeps no reference; the next step starts a new product.
        """
        product = self._begin()
        self._product = None
        self._complete = True
        return product

    @property
    def _current(self) -> P:
        return self._begin()

    def _begin(self) -> P:
        if self._complete:
            self.reset()
        if self._product is None:
            self._product = self._new_product()
        return self._product


class Director:
    """Named, fixed sequences of builder steps.

    A recipe is a sequence of step ids, or `(step_id, kwargs)` pairs when the
    step takes arguments. Replaying a recipe on a fresh builder of one concrete
    type always yields an equal product.
    """

    default_recipes: ClassVar[Mapping[str, tuple[Any, ...]]] = {}

    def __init__(self, recipes: Mapping[str, Iterable[Any]] | None = None) -> None:
        self._recipes: dict[str, tuple[tuple[str, dict[str, Any]], ...]] = {}
        for name, steps in {**self.default_recipes, **(recipes or {})}.items():
            self.define(name, steps)

    def define(self, name: str, steps: Iterable[Any]) -> None:
        normalized = []
        for item in steps:
            if isinstance(item, str):
                normalized.append((item, {}))
            else:
                step_id, kwargs = item
                normalized.append((step_id, dict(kwargs)))
        self._recipes[name] = tuple(normalized)
        logger.debug("Defined recipe %r: %s", name, [s for s, _ in normalized])

    def recipes(self) -> list[str]:
        return list(self._recipes)

    def steps_of(self, name: str) -> list[str]:
        return [step_id for step_id, _ in self._recipe(name)]

    def construct(self, name: str, builder: Builder[P]) -> P:
        """Apply recipe 'name' to a fresh run of 'builder' and return the product."""
        recipe = self._recipe(name)
        builder.reset()
        for step_id, kwargs in recipe:
            builder.apply(step_id, **kwargs)
        return builder.get_product()

    def _recipe(self, name: str) -> tuple[tuple[str, dict[str, Any]], ...]:
        try:
            return self._recipes[name]
        except KeyError:
            msg = f"No recipe named {name!r}. Available: {self.recipes()}"
            raise RecipeNotFound(msg) from None

"""Cloning subsystem: deep-copy construction and a registry of named templates."""

from __future__ import annotations

import copy
import logging
import threading
from typing import TYPE_CHECKING, Any, TypeVar

from ._errors import TemplateNotFound
from ._product import Cloneable


if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping


logger = logging.getLogger(__name__)

T = TypeVar("T")


class Prototype:
    """Mixin giving a product an independent `clone()`.

    The clone has the same concrete type and a recursive copy of every
    internally owned sub-object. Override `__deepcopy__` when an attribute
    must be shared or rebuilt rather than copied.
    """

    def clone(self) -> Prototype:
        return copy.deepcopy(self)


class PrototypeRegistry:
    """Name -> template map that only ever hands out clones."""

    def __init__(self) -> None:
        self._templates: dict[str, Cloneable] = {}
        self._lock = threading.RLock()

    def register(self, name: str, template: Cloneable, *, replace: bool = False) -> None:
        """Hold a private copy of 'template' under 'name'.

        The caller keeps ownership of the object it passed in; later changes to it
        do not reach the stored template.
        """
        if not isinstance(template, Cloneable):
            msg = f"Template {type(template).__name__} does not provide clone()"
            raise TypeError(msg)

        with self._lock:
            if not replace and name in self._templates:
                msg = f"Template {name!r} is already registered. Pass replace=True to overwrite."
                raise KeyError(msg)
            self._templates[name] = template.clone()
        logger.debug("Registered template %r (%s)", name, type(template).__name__)

    def unregister(self, name: str) -> None:
        with self._lock:
            try:
                del self._templates[name]
            except KeyError:
                raise TemplateNotFound(self._missing(name)) from None

    def create(self, name: str, **changes: Any) -> Cloneable:
        """Clone the template registered as 'name'.

        `changes` are set as attributes on the clone, never on the template.
        """
        with self._lock:
            template = self._templates.get(name)
            if template is None:
                raise TemplateNotFound(self._missing(name))
            product = template.clone()

        return apply_changes(product, changes)

    create_from_template = create

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._templates)

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def _missing(self, name: str) -> str:
        return f"No template registered as {name!r}. Available: {self.names()}"


def apply_changes(product: T, changes: Mapping[str, Any]) -> T:
    """Set existing attributes of a freshly cloned product."""
    for attr, value in changes.items():
        if not hasattr(product, attr):
            msg = f"{type(product).__name__} has no attribute {attr!r}"
            raise AttributeError(msg)
        setattr(product, attr, value)
    return product

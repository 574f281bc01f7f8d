from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Product(Protocol):
    """Capability every provisioned object exposes."""

    def render(self) -> str: ...


@runtime_checkable
class TaggedProduct(Protocol):
    """A product that belongs to one family (e.g. one platform)."""

    family: str

    def render(self) -> str: ...


@runtime_checkable
class Cloneable(Protocol):
    def clone(self) -> Cloneable: ...

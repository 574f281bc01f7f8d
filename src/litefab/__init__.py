"""Lightweight object-provisioning library.

This package collects the creational patterns behind small, explicit
contracts: keyed factories, family factories, staged builders with directors,
prototype cloning and guarded singletons, plus a provisioner that serves any of
them under a token.

Exports:
- `KeyedFactory`: discriminator -> product constructor, fresh instance per call.
- `FamilyFactory` / `FamilyRegistry`: products of one family, never mixed.
- `Builder`, `step`, `Director`: staged construction and replayable recipes.
- `Prototype` / `PrototypeRegistry`: deep-copy cloning and named templates.
- `SingletonCell` / `SingletonMeta`: one instance per process, created once.
- `Provisioner`: token registrations with singleton/transient/prototype
  lifetimes and optional scoping.
- A small catalog of products (shapes, GUI widgets, cars) built on the above.
"""

from ._builder import BuildState, Builder, Director, step
from ._errors import (
    FamilyMismatch,
    ProvisioningError,
    RecipeNotFound,
    ResolutionError,
    TemplateNotFound,
    UnsupportedVariant,
)
from ._factory import KeyedFactory
from ._family import FamilyFactory, FamilyRegistry
from ._product import Cloneable, Product, TaggedProduct
from ._prototype import Prototype, PrototypeRegistry
from ._provisioner import Lifetime, Provisioner, Scope
from ._shapes import Circle, Rectangle, Shape, ShapeKind, Square, shape_factory, shape_templates
from ._singleton import SingletonCell, SingletonMeta, SingletonState, singleton_state
from ._vehicles import Car, CarBuilder, CarDirector, CarManualBuilder, Manual
from ._widgets import (
    GUIFactory,
    LinuxFactory,
    MacFactory,
    Toggle,
    Widget,
    WindowsFactory,
    gui_families,
)


__all__ = [
    "BuildState",
    "Builder",
    "Car",
    "CarBuilder",
    "CarDirector",
    "CarManualBuilder",
    "Circle",
    "Cloneable",
    "Director",
    "FamilyFactory",
    "FamilyMismatch",
    "FamilyRegistry",
    "GUIFactory",
    "KeyedFactory",
    "Lifetime",
    "LinuxFactory",
    "MacFactory",
    "Manual",
    "Product",
    "Prototype",
    "PrototypeRegistry",
    "ProvisioningError",
    "RecipeNotFound",
    "Rectangle",
    "ResolutionError",
    "Scope",
    "Shape",
    "ShapeKind",
    "SingletonCell",
    "SingletonMeta",
    "SingletonState",
    "Square",
    "TaggedProduct",
    "TemplateNotFound",
    "Toggle",
    "UnsupportedVariant",
    "Widget",
    "WindowsFactory",
    "gui_families",
    "shape_factory",
    "shape_templates",
    "singleton_state",
    "step",
]

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from ._factory import KeyedFactory
from ._product import Product
from ._prototype import Prototype, PrototypeRegistry


class ShapeKind(Enum):
    CIRCLE = "circle"
    RECTANGLE = "rectangle"
    SQUARE = "square"


class Shape(Prototype, ABC):
    """Base for the catalog shapes.

    `position` and `style` are owned sub-objects, so clones get their own copies.
    """

    kind: ShapeKind

    def __init__(
        self,
        x: float = 0,
        y: float = 0,
        color: str = "black",
        style: dict[str, object] | None = None,
    ) -> None:
        self.position = [x, y]
        self.color = color
        self.style = dict(style or {})

    def move_to(self, x: float, y: float) -> None:
        self.position[0] = x
        self.position[1] = y

    @abstractmethod
    def area(self) -> float: ...

    @abstractmethod
    def render(self) -> str: ...

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return vars(self) == vars(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({fields})"


class Circle(Shape):
    kind = ShapeKind.CIRCLE

    def __init__(self, radius: float = 1, **kwargs: object) -> None:
        super().__init__(**kwargs)  # type: ignore[arg-type]
        self.radius = radius

    def area(self) -> float:
        return 3.141592653589793 * self.radius**2

    def render(self) -> str:
        x, y = self.position
        return f"Circle(r={self.radius}) at ({x}, {y}) in {self.color}"


class Rectangle(Shape):
    kind = ShapeKind.RECTANGLE

    def __init__(self, width: float = 1, height: float = 1, **kwargs: object) -> None:
        super().__init__(**kwargs)  # type: ignore[arg-type]
        self.width = width
        self.height = height

    def area(self) -> float:
        return self.width * self.height

    def render(self) -> str:
        x, y = self.position
        return f"Rectangle({self.width}x{self.height}) at ({x}, {y}) in {self.color}"


class Square(Shape):
    kind = ShapeKind.SQUARE

    def __init__(self, side: float = 1, **kwargs: object) -> None:
        super().__init__(**kwargs)  # type: ignore[arg-type]
        self.side = side

    def area(self) -> float:
        return self.side**2

    def render(self) -> str:
        x, y = self.position
        return f"Square({self.side}) at ({x}, {y}) in {self.color}"


def shape_factory() -> KeyedFactory[ShapeKind]:
    """Sealed factory covering every `ShapeKind`."""
    return KeyedFactory(
        {
            ShapeKind.CIRCLE: Circle,
            ShapeKind.RECTANGLE: Rectangle,
            ShapeKind.SQUARE: Square,
        },
        product_type=Product,
        keys=ShapeKind,
    ).seal()


def shape_templates() -> PrototypeRegistry:
    registry = PrototypeRegistry()
    registry.register("unit-circle", Circle())
    registry.register("big-red-circle", Circle(radius=10, color="red"))
    registry.register("card", Rectangle(width=85.6, height=53.98, style={"corner_radius": 3}))
    registry.register("tile", Square(side=8, style={"border": {"width": 1, "color": "grey"}}))
    return registry

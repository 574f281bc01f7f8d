from __future__ import annotations

from dataclasses import dataclass, field

from ._builder import Builder, Director, step


@dataclass
class Car:
    engine: str | None = None
    seats: int | None = None
    gps: bool = False
    sunroof: bool = False
    sound: str | None = None

    def render(self) -> str:
        parts = [f"engine={self.engine or 'none'}", f"seats={self.seats or 0}"]
        parts.extend(name for name in ("gps", "sunroof") if getattr(self, name))
        if self.sound:
            parts.append(f"sound={self.sound}")
        return f"Car({', '.join(parts)})"


@dataclass
class Manual:
    sections: dict[str, str] = field(default_factory=dict)

    def render(self) -> str:
        return "\n".join(f"{name.capitalize()}: {text}" for name, text in self.sections.items())


class CarBuilder(Builder[Car]):
    def _new_product(self) -> Car:
        return Car()

    @step("engine")
    def build_engine(self, kind: str = "V6") -> None:
        self._current.engine = kind

    @step("seats")
    def build_seats(self, count: int = 4) -> None:
        self._current.seats = count

    @step("gps")
    def build_gps(self, enabled: bool = True) -> None:
        self._current.gps = enabled

    @step("sunroof")
    def build_sunroof(self, enabled: bool = True) -> None:
        self._current.sunroof = enabled

    @step("sound")
    def build_sound(self, system: str = "Standard") -> None:
        self._current.sound = system


class CarManualBuilder(Builder[Manual]):
    """Writes the owner's manual for the car the same steps would build."""

    def _new_product(self) -> Manual:
        return Manual()

    @step("engine")
    def build_engine(self, kind: str = "V6") -> None:
        self._current.sections["engine"] = f"{kind} engine. Use premium fuel."

    @step("seats")
    def build_seats(self, count: int = 4) -> None:
        self._current.sections["seats"] = f"{count} seats with belts."

    @step("gps")
    def build_gps(self, enabled: bool = True) -> None:
        if enabled:
            self._current.sections["gps"] = "Navigation: hold the map button to set a destination."
        else:
            self._current.sections.pop("gps", None)

    @step("sunroof")
    def build_sunroof(self, enabled: bool = True) -> None:
        if enabled:
            self._current.sections["sunroof"] = "Sunroof: close before washing the car."
        else:
            self._current.sections.pop("sunroof", None)

    @step("sound")
    def build_sound(self, system: str = "Standard") -> None:
        self._current.sections["sound"] = f"{system} sound system."


class CarDirector(Director):
    default_recipes = {
        "basic": ("engine", "seats"),
        "full": ("engine", "seats", "gps", "sunroof", "sound"),
        "sports": (("engine", {"kind": "V8 Sport"}), ("seats", {"count": 2}), "gps"),
    }

from __future__ import annotations

from typing import ClassVar

from ._family import FamilyFactory, FamilyRegistry


class Widget:
    family: ClassVar[str]
    role: ClassVar[str]

    def __init__(self, label: str = "") -> None:
        self.label = label

    def render(self) -> str:
        text = f"{self.family} {self.role.capitalize()}"
        return f"{text} [{self.label}]" if self.label else text


class Toggle(Widget):
    role = "checkbox"

    def __init__(self, label: str = "", checked: bool = False) -> None:
        super().__init__(label)
        self.checked = checked

    def toggle(self) -> bool:
        self.checked = not self.checked
        return self.checked


class WindowsButton(Widget):
    family = "Windows"
    role = "button"


class WindowsCheckbox(Toggle):
    family = "Windows"


class MacButton(Widget):
    family = "Mac"
    role = "button"


class MacCheckbox(Toggle):
    family = "Mac"


class LinuxButton(Widget):
    family = "Linux"
    role = "button"


class LinuxCheckbox(Toggle):
    family = "Linux"


class GUIFactory(FamilyFactory):
    """Family factory for the `button` and `checkbox` roles."""

    required_roles = frozenset({"button", "checkbox"})

    def create_button(self, label: str = "") -> Widget:
        return self.create("button", label=label)

    def create_checkbox(self, label: str = "", checked: bool = False) -> Toggle:
        return self.create("checkbox", label=label, checked=checked)


class WindowsFactory(GUIFactory):
    family = "Windows"
    products = {"button": WindowsButton, "checkbox": WindowsCheckbox}


class MacFactory(GUIFactory):
    family = "Mac"
    products = {"button": MacButton, "checkbox": MacCheckbox}


class LinuxFactory(GUIFactory):
    family = "Linux"
    products = {"button": LinuxButton, "checkbox": LinuxCheckbox}


def gui_families() -> FamilyRegistry:
    registry = FamilyRegistry()
    for factory_cls in (WindowsFactory, MacFactory, LinuxFactory):
        registry.register(factory_cls)
    return registry

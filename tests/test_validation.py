import unittest

import pytest

from litefab import (
    Circle,
    KeyedFactory,
    Product,
    ProvisioningError,
    Provisioner,
    ResolutionError,
    TaggedProduct,
    TemplateNotFound,
    UnsupportedVariant,
    WindowsFactory,
)


class Label:
    def render(self) -> str:
        return "label"


class Silent:
    def beep(self) -> None:
        pass


class TestProductConformanceInKeyedFactory(unittest.TestCase):
    widgets: KeyedFactory

    def setUp(self):
        self.widgets = KeyedFactory(product_type=Product)

    def test_structurally_conforming_variant_is_accepted(self):
        self.widgets.register("label", Label)
        assert self.widgets.create("label").render() == "label"

    def test_variant_without_render_is_rejected(self):
        with pytest.raises(TypeError, match="missing members: render"):
            self.widgets.register("silent", Silent)
        assert "silent" not in self.widgets

    def test_render_with_optional_argument_is_accepted(self):
        class Verbose:
            def render(self, indent: int = 0) -> str:
                return " " * indent + "verbose"

        self.widgets.register("verbose", Verbose)
        assert self.widgets.create("verbose").render() == "verbose"

    def test_render_returning_wrong_type_is_rejected(self):
        class Counter:
            def render(self) -> int:
                return 3

        with pytest.raises(TypeError, match="return type"):
            self.widgets.register("counter", Counter)

    def test_render_that_is_not_callable_is_rejected(self):
        class Static:
            render = "static"

        with pytest.raises(TypeError, match="not Callable"):
            self.widgets.register("static", Static)

    def test_factory_output_checked_when_created(self):
        self.widgets.register("silent", factory=Silent)
        # a factory cannot be inspected up front, only its products
        with pytest.raises(TypeError, match="does not conform"):
            self.widgets.create("silent")


class TestTaggedProductConformance(unittest.TestCase):
    prov: Provisioner

    def setUp(self):
        self.prov = Provisioner()

    def test_family_widget_satisfies_tagged_product(self):
        self.prov.register(TaggedProduct, factory=lambda p: WindowsFactory().create_button())
        assert self.prov.resolve(TaggedProduct).family == "Windows"

    def test_product_without_family_is_not_tagged(self):
        with pytest.raises(TypeError, match="family"):
            self.prov.register(TaggedProduct, Label)

    def test_register_instance_checks_tagged_product(self):
        with pytest.raises(TypeError):
            self.prov.register_instance(TaggedProduct, Circle())


def test_product_protocol_accepts_catalog_shapes():
    prov = Provisioner()
    prov.register(Product, Circle)
    assert "Circle" in prov.resolve(Product).render()


def test_register_requires_impl_or_factory():
    prov = Provisioner()
    with pytest.raises(ValueError, match="must be provided"):
        prov.register("a")


def test_register_rejects_impl_and_factory_together():
    prov = Provisioner()
    with pytest.raises(ValueError, match="not both"):
        prov.register("a", Circle, factory=lambda p: Circle())


def test_register_impl_requires_subclass_of_concrete_token():
    with pytest.raises(TypeError):
        Provisioner().register(Circle, impl=Label)


def test_register_instance_twice_requires_replace():
    prov = Provisioner()
    prov.register_instance("config", {"a": 1})
    with pytest.raises(KeyError):
        prov.register_instance("config", {"a": 2})

    prov.register_instance("config", {"a": 2}, replace=True)
    assert prov.resolve("config") == {"a": 2}


def test_unregistered_token_raises_resolution_error():
    prov = Provisioner()
    with pytest.raises(ResolutionError):
        prov.resolve("unknown-token")


def test_unregistered_class_is_not_auto_wired():
    with pytest.raises(ResolutionError):
        Provisioner().resolve(Label)


def test_factory_receives_provisioner():
    prov = Provisioner()

    class DB: ...

    class Repo:
        def __init__(self, db):
            self.db = db

    prov.register(DB, DB)
    prov.register(Repo, factory=lambda p: Repo(p.resolve(DB)))

    repo = prov.resolve(Repo)
    assert isinstance(repo.db, DB)


def test_error_taxonomy_shares_base():
    for exc in (UnsupportedVariant, TemplateNotFound, ResolutionError):
        assert issubclass(exc, ProvisioningError)
        assert issubclass(exc, LookupError)

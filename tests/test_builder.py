import unittest
from dataclasses import dataclass, field

import pytest

from litefab import (
    BuildState,
    Builder,
    Car,
    CarBuilder,
    CarDirector,
    CarManualBuilder,
    Director,
    Manual,
    RecipeNotFound,
    UnsupportedVariant,
    step,
)


class TestCarBuilder(unittest.TestCase):
    builder: CarBuilder

    def setUp(self):
        self.builder = CarBuilder()

    def test_fresh_builder_is_empty(self):
        assert self.builder.state is BuildState.EMPTY
        assert self.builder.steps_done == frozenset()

    def test_steps_move_to_partial_and_are_recorded(self):
        self.builder.build_engine()
        assert self.builder.state is BuildState.PARTIAL
        self.builder.build_seats()
        assert self.builder.steps_done == {"engine", "seats"}

    def test_skipped_steps_leave_defaults(self):
        self.builder.build_engine().build_seats()
        car = self.builder.get_product()

        assert car.engine == "V6"
        assert car.seats == 4
        assert car.gps is False
        assert car.sunroof is False
        assert car.sound is None

    def test_get_product_without_steps_returns_defaults(self):
        assert self.builder.get_product() == Car()

    def test_reinvoking_step_overwrites_contribution(self):
        self.builder.build_engine("V6").build_engine("Electric")
        car = self.builder.get_product()
        assert car.engine == "Electric"

    def test_get_product_completes_and_releases_product(self):
        self.builder.build_engine()
        first = self.builder.get_product()
        assert self.builder.state is BuildState.COMPLETE

        self.builder.build_seats(2)
        second = self.builder.get_product()

        assert second is not first
        assert first.seats is None
        assert second.engine is None
        assert second.seats == 2

    def test_step_after_completion_starts_new_product(self):
        self.builder.build_engine().get_product()
        self.builder.build_gps()
        assert self.builder.steps_done == {"gps"}
        assert self.builder.state is BuildState.PARTIAL

    def test_reset_discards_work(self):
        self.builder.build_engine().build_gps()
        self.builder.reset()
        assert self.builder.state is BuildState.EMPTY
        assert self.builder.get_product() == Car()

    def test_apply_runs_step_by_id(self):
        self.builder.apply("sound", system="Premium")
        assert self.builder.get_product().sound == "Premium"

    def test_apply_unknown_step_raises(self):
        with pytest.raises(UnsupportedVariant):
            self.builder.apply("turbo")

    def test_steps_lists_declared_step_ids(self):
        assert CarBuilder.steps() == ["engine", "seats", "gps", "sunroof", "sound"]


class TestCarDirector(unittest.TestCase):
    director: CarDirector

    def setUp(self):
        self.director = CarDirector()

    def test_basic_recipe(self):
        car = self.director.construct("basic", CarBuilder())
        assert car == Car(engine="V6", seats=4)

    def test_full_recipe(self):
        car = self.director.construct("full", CarBuilder())
        assert car == Car(engine="V6", seats=4, gps=True, sunroof=True, sound="Standard")

    def test_sports_recipe_passes_step_arguments(self):
        car = self.director.construct("sports", CarBuilder())
        assert car == Car(engine="V8 Sport", seats=2, gps=True)

    def test_recipes_are_reproducible_on_fresh_builders(self):
        for name in self.director.recipes():
            assert self.director.construct(name, CarBuilder()) == self.director.construct(name, CarBuilder())

    def test_same_builder_can_be_reused(self):
        builder = CarBuilder()
        builder.build_sunroof()
        basic = self.director.construct("basic", builder)
        assert basic.sunroof is False
        assert self.director.construct("basic", builder) == basic

    def test_manual_builder_follows_same_recipe(self):
        manual = self.director.construct("full", CarManualBuilder())
        assert isinstance(manual, Manual)
        assert list(manual.sections) == ["engine", "seats", "gps", "sunroof", "sound"]
        assert "V6 engine" in manual.render()

    def test_basic_manual_has_no_optional_sections(self):
        manual = self.director.construct("basic", CarManualBuilder())
        assert set(manual.sections) == {"engine", "seats"}

    def test_unknown_recipe_raises(self):
        with pytest.raises(RecipeNotFound):
            self.director.construct("limo", CarBuilder())

    def test_define_custom_recipe(self):
        self.director.define("commuter", ["engine", ("sound", {"system": "Radio"})])
        assert self.director.steps_of("commuter") == ["engine", "sound"]
        car = self.director.construct("commuter", CarBuilder())
        assert car == Car(engine="V6", sound="Radio")

    def test_recipes_passed_to_constructor_extend_defaults(self):
        director = CarDirector({"bare": ()})
        assert set(director.recipes()) == {"basic", "full", "sports", "bare"}
        assert director.construct("bare", CarBuilder()) == Car()

    def test_recipe_with_unknown_step_raises(self):
        director = Director({"odd": ["engine", "wings"]})
        with pytest.raises(UnsupportedVariant):
            director.construct("odd", CarBuilder())


@dataclass
class Pizza:
    size: str = "medium"
    toppings: list = field(default_factory=list)


class PizzaBuilder(Builder[Pizza]):
    def _new_product(self):
        return Pizza()

    @step("size")
    def set_size(self, size="large"):
        self._current.size = size

    @step("toppings")
    def add_toppings(self, *names):
        self._current.toppings = list(names)


def test_custom_builder_with_positional_step_arguments():
    pizza = PizzaBuilder().set_size("small").add_toppings("olive", "basil").get_product()
    assert pizza == Pizza(size="small", toppings=["olive", "basil"])


def test_subclass_inherits_and_overrides_steps():
    class FamilyPizzaBuilder(PizzaBuilder):
        @step("size")
        def set_family_size(self, size="family"):
            self._current.size = size

    assert FamilyPizzaBuilder.steps() == ["size", "toppings"]
    pizza = FamilyPizzaBuilder().apply("size").get_product()
    assert pizza.size == "family"


def test_builders_do_not_share_state():
    a, b = PizzaBuilder(), PizzaBuilder()
    a.add_toppings("ham")
    assert b.state is BuildState.EMPTY
    assert b.get_product().toppings == []

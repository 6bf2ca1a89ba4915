"""Tests for BindingInstaller — free-function import and bound helpers."""

from __future__ import annotations

import fractions
import sys
import types

import pytest

from paramcoerce.errors import (
    InvalidMethodName,
    InvalidTypeName,
    MethodCollision,
    TargetLoadError,
    UnsupportedImport,
)
from paramcoerce.services.binding import install, uses_coercion
from paramcoerce.services.engine import CoercionEngine, coerce


class Bar:
    def __init__(self, value: object = None) -> None:
        self.value = value


class Foo:
    def __init__(self, value: object) -> None:
        self.value = value

    def __as_Bar__(self) -> Bar:
        return Bar(self.value)


@pytest.fixture(autouse=True)
def _register_bar(default_engine: CoercionEngine) -> None:
    default_engine.registry.register(Bar, "Bar")
    default_engine.registry.register(Foo, "Foo")


def _consumer() -> type:
    class Consumer:
        def existing(self) -> str:
            return "original"

    return Consumer


class TestNoArguments:
    def test_no_op(self) -> None:
        consumer = _consumer()
        before = dict(vars(consumer))
        install(consumer)
        assert dict(vars(consumer)) == before


class TestFreeFunction:
    def test_binds_coerce_on_class(self) -> None:
        consumer = _consumer()
        install(consumer, "coerce")
        result = consumer.coerce("Bar", Foo(1))
        assert isinstance(result, Bar)
        assert consumer().coerce("Bar", 42) is None

    def test_binds_coerce_on_module(self) -> None:
        module = types.ModuleType("consumer_module")
        install(module, "coerce")
        assert module.coerce is coerce

    @pytest.mark.parametrize("name", ["param", "Coerce", "_coerce", ""])
    def test_other_single_names_rejected(self, name: str) -> None:
        consumer = _consumer()
        with pytest.raises(UnsupportedImport, match="does not export"):
            install(consumer, name)
        assert "coerce" not in vars(consumer)


class TestArity:
    def test_too_many_parameters(self) -> None:
        with pytest.raises(UnsupportedImport, match="Too many"):
            install(_consumer(), "_bar", "Bar", "extra")

    def test_consumer_must_be_class_or_module(self) -> None:
        with pytest.raises(UnsupportedImport):
            install(object(), "_bar", "Bar")  # type: ignore[arg-type]


class TestBoundHelper:
    def test_class_helper(self) -> None:
        consumer = _consumer()
        install(consumer, "_bar", "Bar")
        result = consumer._bar(Foo(3))
        assert isinstance(result, Bar)
        assert result.value == 3

    def test_callable_on_instance(self) -> None:
        consumer = _consumer()
        install(consumer, "_bar", "Bar")
        bar = Bar()
        assert consumer()._bar(bar) is bar

    def test_unconvertible_gives_none(self) -> None:
        consumer = _consumer()
        install(consumer, "_bar", "Bar")
        assert consumer._bar(42) is None
        assert consumer._bar(object()) is None

    def test_helper_metadata(self) -> None:
        consumer = _consumer()
        install(consumer, "_bar", "Bar")
        assert consumer._bar.__name__ == "_bar"
        assert consumer._bar.__qualname__.endswith("Consumer._bar")

    def test_module_helper(self) -> None:
        module = types.ModuleType("consumer_module")
        install(module, "to_bar", "Bar")
        result = module.to_bar(Foo("m"))
        assert isinstance(result, Bar)
        assert result.value == "m"

    def test_helper_uses_engine_at_call_time(self, default_engine: CoercionEngine) -> None:
        consumer = _consumer()
        install(consumer, "_bar", "Bar")
        consumer._bar(Foo(1))
        assert (Foo, "Bar") in default_engine.cache

    def test_decorator_form(self) -> None:
        @uses_coercion("_bar", "Bar")
        class Basket:
            def __init__(self, item: object) -> None:
                self.item = self._bar(item)

        basket = Basket(Foo("apple"))
        assert isinstance(basket.item, Bar)
        assert basket.item.value == "apple"

    def test_decorator_no_op(self) -> None:
        @uses_coercion()
        class Plain:
            pass

        assert not hasattr(Plain, "coerce")


class TestValidation:
    @pytest.mark.parametrize("method", ["", "foo::bar", "1abc", "foo.bar"])
    def test_invalid_method_name(self, method: str) -> None:
        with pytest.raises(InvalidMethodName):
            install(_consumer(), method, "Bar")

    @pytest.mark.parametrize("target", ["", "1abc", "foo::", "a b"])
    def test_invalid_target(self, target: str) -> None:
        with pytest.raises(InvalidTypeName):
            install(_consumer(), "_bar", target)


class TestCollision:
    def test_existing_method_not_replaced(self) -> None:
        class Consumer:
            def _Bar(self) -> str:
                return "mine"

        original = vars(Consumer)["_Bar"]
        with pytest.raises(MethodCollision, match="already exists"):
            install(Consumer, "_Bar", "Bar")
        assert vars(Consumer)["_Bar"] is original
        assert Consumer()._Bar() == "mine"

    def test_second_install_collides(self) -> None:
        consumer = _consumer()
        install(consumer, "_bar", "Bar")
        helper = vars(consumer)["_bar"]
        with pytest.raises(MethodCollision):
            install(consumer, "_bar", "Bar")
        assert vars(consumer)["_bar"] is helper

    def test_module_attribute_collision(self) -> None:
        module = types.ModuleType("consumer_module")
        module.to_bar = len  # type: ignore[attr-defined]
        with pytest.raises(MethodCollision):
            install(module, "to_bar", "Bar")
        assert module.to_bar is len

    def test_inherited_name_is_not_a_collision(self) -> None:
        base = _consumer()
        child = type("Child", (base,), {})
        install(child, "existing", "Bar")
        assert isinstance(child.existing(Foo(1)), Bar)
        assert base().existing() == "original"


class TestTargetLoading:
    def test_imports_unloaded_target(self) -> None:
        consumer = _consumer()
        install(consumer, "_fraction", "fractions.Fraction")
        half = fractions.Fraction(1, 2)
        assert consumer._fraction(half) is half

    def test_load_failure_is_fatal(self) -> None:
        consumer = _consumer()
        with pytest.raises(TargetLoadError):
            install(consumer, "_thing", "paramcoerce_no_such_pkg.Thing")
        assert "_thing" not in vars(consumer)
        assert "paramcoerce_no_such_pkg" not in sys.modules

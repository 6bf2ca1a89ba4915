"""Tests for conversion directives."""

import dataclasses

import pytest

from paramcoerce.domain.directives import NO_CONVERSION, Directive, DirectiveKind


def _to_thing(value, target_type):
    return target_type()


class TestDirective:
    def test_push(self) -> None:
        d = Directive.push("__as_Bar__")
        assert d.kind is DirectiveKind.PUSH
        assert d.method == "__as_Bar__"
        assert not d.is_none

    def test_pull(self) -> None:
        d = Directive.pull("__from_Foo__")
        assert d.kind is DirectiveKind.PULL
        assert d.method == "__from_Foo__"

    def test_external(self) -> None:
        d = Directive.external(_to_thing)
        assert d.kind is DirectiveKind.EXTERNAL
        assert d.function is _to_thing
        assert d.method is None

    def test_no_conversion(self) -> None:
        assert NO_CONVERSION.is_none
        assert NO_CONVERSION.kind == "none"

    def test_equality_by_value(self) -> None:
        assert Directive.push("__as_Bar__") == Directive.push("__as_Bar__")
        assert Directive.push("__as_Bar__") != Directive.pull("__as_Bar__")

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            NO_CONVERSION.kind = DirectiveKind.PUSH  # type: ignore[misc]


class TestDescribe:
    def test_push(self) -> None:
        assert Directive.push("__as_Bar__").describe() == "push(__as_Bar__)"

    def test_pull(self) -> None:
        assert Directive.pull("__from_Foo__").describe() == "pull(__from_Foo__)"

    def test_external_uses_qualname(self) -> None:
        assert Directive.external(_to_thing).describe() == "external(_to_thing)"

    def test_none(self) -> None:
        assert NO_CONVERSION.describe() == "none"

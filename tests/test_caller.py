import sys

import pytest

from debuginfolib.caller import resolve_caller, resolve_caller_name
from debuginfolib.models import CallerIdentity, CallerNameFormat

MODULE = __name__
MODULE_SHORT = MODULE.rsplit(".", 1)[-1]

needs_qualname = pytest.mark.skipif(
    sys.version_info < (3, 11), reason="declaring class needs co_qualname"
)


class Chain:
    def a(self, info):
        return self.b(info)

    def b(self, info):
        return self.c(info)

    def c(self, info):
        return self.d(info)

    def d(self, info):
        return info.full_name


class Base:
    def where(self, info):
        return info.short_name


class Child(Base):
    pass


class Helpers:
    @staticmethod
    def static(info):
        return info.short_name

    @classmethod
    def klass(cls, info):
        return info.full_name


def module_function(info):
    return info.full_name


def module_function_class(info):
    return info.class_name


class TestCallerAccessors:
    @pytest.mark.parametrize("attr, expected", [
        ("name", "test_accessor"),
        ("short_name", "TestCallerAccessors.test_accessor"),
        ("full_name", f"{MODULE}.TestCallerAccessors.test_accessor"),
        ("class_name", "TestCallerAccessors"),
        ("full_class_name", f"{MODULE}.TestCallerAccessors"),
    ])
    def test_accessor(self, info, attr, expected):
        assert getattr(info, attr) == expected

    @pytest.mark.parametrize("fmt, expected", [
        (CallerNameFormat.NAME, "test_configured_format"),
        (CallerNameFormat.SHORT_NAME, "TestCallerAccessors.test_configured_format"),
        (CallerNameFormat.FULL_NAME, f"{MODULE}.TestCallerAccessors.test_configured_format"),
        (CallerNameFormat.CLASS_NAME, "TestCallerAccessors"),
        (CallerNameFormat.FULL_CLASS_NAME, f"{MODULE}.TestCallerAccessors"),
    ])
    def test_configured_format(self, info, fmt, expected):
        info.init(fmt)
        assert info.caller_name() == expected

    def test_accessors_ignore_configured_format(self, info):
        info.caller_name_format = CallerNameFormat.CLASS_NAME
        assert info.name == "test_accessors_ignore_configured_format"
        assert info.full_name.endswith(".TestCallerAccessors.test_accessors_ignore_configured_format")


def test_deep_chain_reports_innermost_caller(info):
    assert Chain().a(info) == f"{MODULE}.Chain.d"


def test_depth_below_caller_does_not_matter(info):
    def wrap(n):
        if n == 0:
            return Chain().d(info)
        return wrap(n - 1)

    assert wrap(50) == f"{MODULE}.Chain.d"


@needs_qualname
def test_inherited_method_reports_declaring_class(info):
    assert Child().where(info) == "Base.where"


@needs_qualname
def test_static_method(info):
    assert Helpers.static(info) == "Helpers.static"


def test_class_method(info):
    assert Helpers.klass(info) == f"{MODULE}.Helpers.klass"


def test_module_function_uses_module_as_class(info):
    assert module_function(info) == f"{MODULE}.module_function"
    assert module_function_class(info) == MODULE_SHORT


def test_nested_function(info):
    def inner():
        return info.name

    assert inner() == "inner"


def test_resolver_depths():
    assert resolve_caller_name(CallerNameFormat.NAME, 0) == "resolve_caller_name"
    assert resolve_caller_name(CallerNameFormat.NAME, 1) == "test_resolver_depths"
    assert resolve_caller_name("full_name") == f"{MODULE}.test_resolver_depths"


def test_resolve_caller_identity():
    ident = resolve_caller()
    assert ident == CallerIdentity(MODULE, MODULE_SHORT, "test_resolve_caller_identity")


def test_negative_skip_rejected():
    with pytest.raises(ValueError):
        resolve_caller_name(CallerNameFormat.NAME, -1)


def test_skip_beyond_stack_rejected():
    with pytest.raises(ValueError, match="frames deep"):
        resolve_caller_name(CallerNameFormat.NAME, 100_000)


def test_unknown_format_fails_fast():
    with pytest.raises(ValueError, match="Unknown caller name format"):
        resolve_caller_name("bogus")


@pytest.mark.parametrize("fmt, expected", [
    (CallerNameFormat.NAME, "M"),
    (CallerNameFormat.SHORT_NAME, "T.M"),
    (CallerNameFormat.FULL_NAME, "N.T.M"),
    (CallerNameFormat.CLASS_NAME, "T"),
    (CallerNameFormat.FULL_CLASS_NAME, "N.T"),
])
def test_identity_render(fmt, expected):
    assert CallerIdentity("N.T", "T", "M").render(fmt) == expected


@pytest.mark.parametrize("value, expected", [
    ("short_name", CallerNameFormat.SHORT_NAME),
    ("SHORT_NAME", CallerNameFormat.SHORT_NAME),
    ("Full_Class_Name", CallerNameFormat.FULL_CLASS_NAME),
    (CallerNameFormat.NAME, CallerNameFormat.NAME),
])
def test_format_coerce(value, expected):
    assert CallerNameFormat.coerce(value) is expected


@pytest.mark.parametrize("value", ["", "fullname", None, 3])
def test_format_coerce_rejects(value):
    with pytest.raises(ValueError):
        CallerNameFormat.coerce(value)

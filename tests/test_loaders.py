from unittest.mock import Mock

import pytest

from wirebox.container import ServiceContainer
from wirebox.domain import ServiceReference
from wirebox.errors import InvalidConfigurationError
from wirebox.loaders import FactoryLoader, MappingLoader, string_or_service_reference


class A:
    def foo(self):
        return "bar"


class B:
    def woof(self):
        return "woof"


class C:
    def __init__(self, B):
        self.B = B


class D:
    def __init__(self, service_c):
        self.c = service_c


@pytest.fixture
def container() -> Mock:
    return Mock(spec=ServiceContainer)


def test_loads_classes_as_autowired(container):
    MappingLoader(container).load({"service_a": A})

    container.autowire.assert_called_once_with("service_a", A)


def test_loads_aliases(container):
    MappingLoader(container).load({"service_a": "@service_b"})

    container.alias.assert_called_once_with("service_a", "service_b")


@pytest.mark.parametrize("value", ["foobar", 42, True, None, [1, 2]])
def test_sets_plain_values(container, value):
    MappingLoader(container).load({"param_a": value})

    container.set.assert_called_once_with("param_a", value)


def test_autowires_class_configurations_by_default(container):
    MappingLoader(container).load({"service_a": {"class": A, "args": ["ignored"]}})

    container.autowire.assert_called_once_with("service_a", A)
    container.register.assert_not_called()


def test_explicit_arguments_convert_references(container):
    MappingLoader(container).load(
        {"service_a": {"class": A, "autowire": False, "args": ["a", "@service_b", "c"]}}
    )

    container.register.assert_called_once_with("service_a", A)
    container.register.return_value.set_arguments.assert_called_once_with(
        ["a", ServiceReference("service_b"), "c"]
    )


def test_explicit_arguments_default_to_none(container):
    MappingLoader(container).load({"service_a": {"class": A, "autowire": False}})

    container.register.return_value.set_arguments.assert_called_once_with([])


def test_loads_factories_with_tags(container):
    def factory(c):
        return A()

    MappingLoader(container).load({"service_a": {"factory": factory, "tags": ["x"]}})

    container.register_factory.assert_called_once_with("service_a", factory)
    container.register_factory.return_value.add_tag.assert_called_once_with("x")


def test_adds_tags_to_class_configurations(container):
    MappingLoader(container).load({"service_a": {"class": A, "tags": ["foo", "bar"]}})

    add_tag = container.autowire.return_value.add_tag
    assert [call.args for call in add_tag.call_args_list] == [("foo",), ("bar",)]


def test_loads_alias_configurations(container):
    MappingLoader(container).load({"service_a": {"alias": "@service_b"}})

    container.alias.assert_called_once_with("service_a", "service_b")


def test_rejects_alias_without_prefix(container):
    with pytest.raises(InvalidConfigurationError, match="is not a service id"):
        MappingLoader(container).load({"service_a": {"alias": "service_b"}})


def test_rejects_unknown_configuration(container):
    with pytest.raises(InvalidConfigurationError, match="'service_a'"):
        MappingLoader(container).load({"service_a": {"tags": ["lonely"]}})


def test_string_or_service_reference():
    assert string_or_service_reference("@a") == ServiceReference("a")
    assert string_or_service_reference("a") == "a"
    assert string_or_service_reference(3) == 3


def test_factory_loader_passes_the_container():
    container = ServiceContainer()

    def configure(c):
        c.set("dsn", "sqlite://")
        return "configured"

    assert FactoryLoader(container).load(configure) == "configured"
    assert container.get("dsn") == "sqlite://"


def test_loads_and_compiles_a_whole_container():
    container = ServiceContainer()
    MappingLoader(container).load(
        {
            "service_a": A,
            "alias_a": "@service_a",
            "service_b": {"class": B, "tags": ["bee"]},
            "service_c": {"class": C, "autowire": False, "args": ["@service_b"]},
            "service_d": D,
            "service_e": {"factory": lambda c: A()},
        }
    )

    container.compile()

    assert container.get("service_d").c.B.woof() == "woof"
    assert container.get("service_d").c.B is container.get("service_b")
    assert container.get("alias_a") is container.get("service_a")
    assert container.get("service_e").foo() == "bar"
    assert container.find_tagged_service_ids("bee") == ["service_b"]

"""Build recipes for services registered in a :class:`~wirebox.container.ServiceContainer`."""

import inspect
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional, Sequence

from wirebox.domain import MethodCall, ServiceReference
from wirebox.errors import (
    ArgumentCountMismatchError,
    ContainerFrozenError,
    InvalidClassDefinitionError,
    MissingClassDefinitionError,
    UndefinedMethodCallError,
    UnknownAutowireDependencyError,
)
from wirebox.function_parser import parse

if TYPE_CHECKING:
    from wirebox.container import ServiceContainer

__all__ = ["ServiceDefinition", "FactoryFunction", "Materializer"]

FactoryFunction = Callable[["ServiceContainer"], Any]
Materializer = Callable[["ServiceContainer"], Any]


class ServiceDefinition:
    """
    Describes how to build one service.

    A definition builds its service either from a class (instantiated with resolved
    constructor arguments, then configured through queued method calls) or from a
    factory called with the container. The builder methods return the definition so
    they can be chained; they all fail once the owning container is frozen.

    Example:
        >>> container.register("mailer", Mailer) \\
        ...     .set_arguments([ServiceReference("transport")]) \\
        ...     .add_method_call("set_sender", ["noreply@example.com"]) \\
        ...     .add_tag("mail")
    """

    def __init__(
        self,
        class_definition: Optional[type] = None,
        arguments: Optional[Sequence[Any]] = None,
    ):
        if class_definition is not None and not inspect.isclass(class_definition):
            raise InvalidClassDefinitionError(
                f"Invalid class definition: {class_definition!r} is not a class"
            )
        self._class_definition = class_definition
        self._arguments: list[Any] = list(arguments or [])
        self._method_calls: list[MethodCall] = []
        self._factory: Optional[FactoryFunction] = None
        self._autowire = False
        self._tags: list[str] = []
        self._public = False
        self._frozen = False

    def set_factory(self, factory: FactoryFunction) -> "ServiceDefinition":
        self._ensure_mutable()
        if self._class_definition is not None:
            raise InvalidClassDefinitionError(
                f"Definition for {self._class_definition.__name__} already builds from a class "
                "and cannot also use a factory"
            )
        if not callable(factory):
            raise InvalidClassDefinitionError(f"Factory {factory!r} is not callable")
        self._factory = factory
        return self

    def set_autowired(self, value: bool) -> "ServiceDefinition":
        self._ensure_mutable()
        self._autowire = bool(value)
        return self

    def set_public(self, value: bool) -> "ServiceDefinition":
        self._ensure_mutable()
        self._public = bool(value)
        return self

    def set_arguments(self, arguments: Sequence[Any]) -> "ServiceDefinition":
        self._ensure_mutable()
        self._arguments = list(arguments)
        return self

    def set_tags(self, tags: Iterable[str]) -> "ServiceDefinition":
        self._ensure_mutable()
        self._tags = list(dict.fromkeys(tags))
        return self

    def add_tag(self, tag: str) -> "ServiceDefinition":
        self._ensure_mutable()
        if tag not in self._tags:
            self._tags.append(tag)
        return self

    def add_method_call(
        self, method: str, arguments: Optional[Sequence[Any]] = None
    ) -> "ServiceDefinition":
        self._ensure_mutable()
        self._method_calls.append(MethodCall(method, tuple(arguments or ())))
        return self

    def has_tag(self, tag: str) -> bool:
        return tag in self._tags

    def get_class(self) -> Optional[type]:
        return self._class_definition

    def get_factory(self) -> Optional[FactoryFunction]:
        return self._factory

    def get_arguments(self) -> list[Any]:
        return list(self._arguments)

    def get_method_calls(self) -> list[MethodCall]:
        return list(self._method_calls)

    def get_tags(self) -> list[str]:
        return list(self._tags)

    def is_autowired(self) -> bool:
        return self._autowire

    def is_public(self) -> bool:
        return self._public

    def freeze(self) -> None:
        self._frozen = True

    def make_materializer(self) -> Materializer:
        """Return a function that builds a new service instance from this definition.

        The definition does not cache anything: every call of the returned function
        builds a new instance. The container calls it at most once per service id.

        Raises (when the materializer is invoked):
            MissingClassDefinitionError: If neither a class nor a factory was set.
            UnknownAutowireDependencyError: If an autowired parameter names no service.
            ArgumentCountMismatchError: If explicit arguments don't fit the constructor.
            UndefinedMethodCallError: If a queued method does not exist on the instance.
        """

        def materialize(container: "ServiceContainer") -> Any:
            if self._factory is not None:
                return self._factory(container)

            class_definition = self._class_definition
            if class_definition is None:
                raise MissingClassDefinitionError("No class definition found")

            if self._autowire:
                arguments = self._autowired_arguments(class_definition, container)
            else:
                arguments = self._explicit_arguments(class_definition, container)

            service = class_definition(*arguments)

            for call in self._method_calls:
                call_arguments = _resolve_all(call.arguments, container)
                method = getattr(service, call.method, None)
                if not callable(method):
                    raise UndefinedMethodCallError(
                        f"Undefined method '{call.method}' specified with method call "
                        f"on {class_definition.__name__}"
                    )
                method(*call_arguments)

            return service

        return materialize

    def _autowired_arguments(
        self, class_definition: type, container: "ServiceContainer"
    ) -> list[Any]:
        """Resolve each constructor parameter as the service with the same id."""
        parameter_names = parse(class_definition).argument_names
        for index, parameter_name in enumerate(parameter_names):
            if not container.has(parameter_name):
                raise UnknownAutowireDependencyError(
                    class_definition.__name__, index, parameter_name
                )
        return [container.get(parameter_name) for parameter_name in parameter_names]

    def _explicit_arguments(
        self, class_definition: type, container: "ServiceContainer"
    ) -> list[Any]:
        required, total = parse(class_definition).arity
        received = len(self._arguments)
        if not required <= received <= total:
            expected = str(total) if required == total else f"{required} to {total}"
            raise ArgumentCountMismatchError(
                f"Incorrect number of constructor arguments provided in service definition "
                f"for {class_definition.__name__}; expected {expected}, received {received}"
            )
        return _resolve_all(self._arguments, container)

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise ContainerFrozenError(action="modify a service definition")

    def __repr__(self) -> str:
        target = self._class_definition or self._factory
        return (
            f"ServiceDefinition({target!r}, autowire={self._autowire}, tags={self._tags})"
        )


def _resolve(argument: Any, container: "ServiceContainer") -> Any:
    if isinstance(argument, ServiceReference):
        return container.get(argument.get_service_id())
    return argument


def _resolve_all(arguments: Iterable[Any], container: "ServiceContainer") -> list[Any]:
    return [_resolve(argument, container) for argument in arguments]

"""
The service container: a registry of raw values, aliases and service definitions.

Services are resolved lazily: the first :meth:`ServiceContainer.get` for a defined
service runs its definition and caches the result, and every later call returns the
cached instance. :meth:`ServiceContainer.compile` resolves everything eagerly so that
missing dependencies and cycles surface at one deterministic point, then freezes the
container against further registration.

Ids live in one shared namespace: an id is registered either as a raw value (``set``)
or as a definition (``register``, ``autowire``, ``register_factory``,
``register_simple``), and aliases may not shadow either.
"""

import logging
import threading
from typing import Any, Callable, Iterable, Optional, Sequence

from wirebox.definition import FactoryFunction, ServiceDefinition
from wirebox.domain import ServiceReference
from wirebox.errors import (
    AliasAlreadyRegisteredError,
    AliasTargetMissingError,
    ContainerFrozenError,
    CyclicalDependencyError,
    DefinitionNotFoundError,
    DuplicateServiceIdError,
    EmptyContainerError,
    ServiceNotFoundError,
)

__all__ = ["ServiceContainer", "SERVICE_CONTAINER_ID"]

logger = logging.getLogger(__name__)

SERVICE_CONTAINER_ID = "service_container"


class ServiceContainer:
    """Registry and resolver for services.

    Args:
        register_self: If true (the default), the container is set into itself under
            ``service_container`` so definitions can depend on it by reference.

    Example:
        >>> container = ServiceContainer()
        >>> container.set("dsn", "sqlite://")
        >>> container.autowire("database", Database)  # Database(dsn)
        >>> container.compile()
        >>> container.get("database")
    """

    def __init__(self, register_self: bool = True):
        self._values: dict[str, Any] = {}
        self._aliases: dict[str, str] = {}
        self._definitions: dict[str, ServiceDefinition] = {}
        self._instances: dict[str, Any] = {}
        self._frozen = False
        self._is_compiling = False
        self._compilation_path: list[str] = []
        self._lock = threading.RLock()

        if register_self:
            self.set(SERVICE_CONTAINER_ID, self)

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def register(self, service_id: str, class_definition: type) -> ServiceDefinition:
        """Register a class whose constructor arguments will be configured explicitly.

        Returns:
            The new definition, for further configuration (arguments, tags, method calls).

        Raises:
            ContainerFrozenError: If the container is frozen.
            DuplicateServiceIdError: If ``service_id`` is already taken.
            InvalidClassDefinitionError: If ``class_definition`` is not a class.
        """
        return self._set_definition(
            service_id, lambda: ServiceDefinition(class_definition)
        )

    def autowire(self, service_id: str, class_definition: type) -> ServiceDefinition:
        """Register a class whose constructor parameters are resolved by name.

        Each constructor parameter must be named exactly after a registered service id.
        """
        return self._set_definition(
            service_id, lambda: ServiceDefinition(class_definition).set_autowired(True)
        )

    def register_factory(
        self, service_id: str, factory: FactoryFunction
    ) -> ServiceDefinition:
        """Register a callable that builds the service; it is called with this container."""
        return self._set_definition(
            service_id, lambda: ServiceDefinition().set_factory(factory)
        )

    def register_simple(
        self, service_id: str, class_definition: type, dependency_ids: Sequence[str]
    ) -> ServiceDefinition:
        """Register a class whose constructor takes the given services, in order.

        Raises:
            TypeError: If ``dependency_ids`` is a single string rather than a sequence of ids.
        """
        if isinstance(dependency_ids, str):
            raise TypeError(
                f"dependency_ids for '{service_id}' must be a sequence of service ids, "
                f"not the string {dependency_ids!r}"
            )
        return self._set_definition(
            service_id,
            lambda: ServiceDefinition(
                class_definition,
                [ServiceReference(dependency_id) for dependency_id in dependency_ids],
            ),
        )

    def provides(
        self,
        service_id: Optional[str] = None,
        autowire: bool = True,
        tags: Optional[Iterable[str]] = None,
    ) -> Callable[[type], type]:
        """Decorator to register a class as a service.

        Args:
            service_id: Optional id to register under; defaults to the class name.
            autowire: Whether constructor parameters are resolved by name.
            tags: Optional tags to attach to the definition.

        Example:
            @container.provides("mailer", tags=["container_aware"])
            class Mailer(ContainerAware):
                def __init__(self, transport):
                    self.transport = transport
        """

        def decorator(cls: type) -> type:
            provided_id = service_id or cls.__name__
            if autowire:
                definition = self.autowire(provided_id, cls)
            else:
                definition = self.register(provided_id, cls)
            definition.set_tags(tags or [])
            return cls

        return decorator

    def set(self, service_id: str, service: Any) -> Any:
        """Set a finished object into the container, bypassing definitions entirely.

        The object is returned as-is by every :meth:`get`; it cannot be tagged,
        autowired or configured with method calls.
        """
        with self._lock:
            self._ensure_registrable(service_id)
            self._values[service_id] = service
            logger.debug("Set service '%s'", service_id)
            return service

    def alias(self, alias: str, service_id: str) -> None:
        """Make ``alias`` resolve to whatever ``service_id`` resolves to.

        Raises:
            ContainerFrozenError: If the container is frozen.
            AliasTargetMissingError: If ``service_id`` is not registered yet.
            AliasAlreadyRegisteredError: If ``alias`` is already an alias.
            DuplicateServiceIdError: If ``alias`` is already a value or definition id.
        """
        with self._lock:
            if self._frozen:
                raise ContainerFrozenError(alias)
            if not self.has(service_id):
                raise AliasTargetMissingError(alias, service_id)
            if alias in self._aliases:
                raise AliasAlreadyRegisteredError(alias)
            if alias in self._values or alias in self._definitions:
                raise DuplicateServiceIdError(alias)

            self._aliases[alias] = service_id
            logger.debug("Aliased '%s' to '%s'", alias, service_id)

    def freeze(self) -> None:
        """Forbid any further registration. There is no way back."""
        with self._lock:
            self._frozen = True
            for definition in self._definitions.values():
                definition.freeze()
            logger.debug("Service container frozen")

    def compile(self) -> None:
        """Materialise every registered service, then freeze the container.

        Cycles are only detected here: while compiling, resolving a service that is
        already being resolved higher up the stack raises
        :class:`CyclicalDependencyError` with the whole path, e.g. ``a -> b -> a``.
        The first error encountered propagates and leaves the container unfrozen.
        """
        with self._lock:
            self._is_compiling = True
            self._compilation_path = []
            try:
                service_ids = self.get_service_ids()
                logger.debug("Compiling %d services", len(service_ids))
                for service_id in service_ids:
                    self.get(service_id)
                self.freeze()
            finally:
                self._is_compiling = False

    def has(self, service_id: str) -> bool:
        return (
            service_id in self._values
            or service_id in self._aliases
            or service_id in self._definitions
        )

    def get(self, service_id: str) -> Any:
        """Resolve a service, materialising and caching it on first use.

        Lookup order is raw value, then alias (resolved recursively), then definition.

        Raises:
            ServiceNotFoundError: If nothing is registered under ``service_id``; the
                error names the closest registered id.
            EmptyContainerError: If nothing at all is registered.
            CyclicalDependencyError: If a cycle is found during :meth:`compile`.
        """
        with self._lock:
            if not self._is_compiling:
                return self._resolve(service_id)

            if service_id in self._compilation_path:
                raise CyclicalDependencyError(self._compilation_path + [service_id])

            self._compilation_path.append(service_id)
            try:
                return self._resolve(service_id)
            finally:
                self._compilation_path.pop()

    def get_definition(self, service_id: str) -> ServiceDefinition:
        """Return the definition registered under ``service_id``. Aliases are not followed."""
        try:
            return self._definitions[service_id]
        except KeyError:
            raise DefinitionNotFoundError(service_id) from None

    def find_tagged_service_ids(self, tag: str) -> list[str]:
        return [
            service_id
            for service_id, definition in self._definitions.items()
            if definition.has_tag(tag)
        ]

    def add_compiler_pass(self, compiler_pass: Any) -> None:
        """Run ``compiler_pass.process(self)`` immediately."""
        logger.debug("Running compiler pass %s", type(compiler_pass).__name__)
        compiler_pass.process(self)

    def get_all(self, service_ids: Iterable[str]) -> dict[str, Any]:
        """Resolve several services at once, keyed by id.

        Example:
            >>> services = container.get_all(["mailer", "database"])
            >>> services["mailer"]
        """
        return {service_id: self.get(service_id) for service_id in service_ids}

    def get_service_ids(self) -> list[str]:
        """All registered ids: values, then aliases, then definitions."""
        return list(
            dict.fromkeys([*self._values, *self._aliases, *self._definitions])
        )

    def __contains__(self, service_id: str) -> bool:
        return self.has(service_id)

    def __getitem__(self, service_id: str) -> Any:
        return self.get(service_id)

    def __repr__(self) -> str:
        return (
            f"ServiceContainer(services={self.get_service_ids()}, frozen={self._frozen})"
        )

    def _resolve(self, service_id: str) -> Any:
        if service_id in self._values:
            return self._values[service_id]

        if service_id in self._aliases:
            return self.get(self._aliases[service_id])

        if service_id in self._definitions:
            if service_id not in self._instances:
                logger.debug("Materialising service '%s'", service_id)
                materialize = self._definitions[service_id].make_materializer()
                self._instances[service_id] = materialize(self)
            return self._instances[service_id]

        raise self._not_found(service_id)

    def _not_found(self, service_id: str) -> Exception:
        service_ids = self.get_service_ids()
        if not service_ids:
            return EmptyContainerError(service_id)
        suggestion = min(
            service_ids, key=lambda candidate: _edit_distance(service_id, candidate)
        )
        return ServiceNotFoundError(service_id, suggestion)

    def _set_definition(
        self, service_id: str, make_definition: Callable[[], ServiceDefinition]
    ) -> ServiceDefinition:
        with self._lock:
            self._ensure_registrable(service_id)
            definition = make_definition()
            self._definitions[service_id] = definition
            logger.debug("Registered definition '%s': %r", service_id, definition)
            return definition

    def _ensure_registrable(self, service_id: str) -> None:
        if self._frozen:
            raise ContainerFrozenError(service_id)
        if self.has(service_id):
            raise DuplicateServiceIdError(service_id)


def _edit_distance(a: str, b: str) -> int:
    """Levenshtein distance: single-character insertions, deletions and substitutions."""
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(a) + 1))
    for i, b_char in enumerate(b, start=1):
        current = [i]
        for j, a_char in enumerate(a, start=1):
            if a_char == b_char:
                current.append(previous[j - 1])
            else:
                current.append(
                    min(previous[j - 1] + 1, current[j - 1] + 1, previous[j] + 1)
                )
        previous = current
    return previous[-1]

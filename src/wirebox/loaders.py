"""
Loaders that translate a declarative structure or a setup callback into registrations.

A mapping handed to :class:`MappingLoader` holds one entry per service id::

    {
        "dsn": "sqlite://",                     # any plain value is set as-is
        "db": "@database",                      # "@id" makes an alias
        "database": Database,                   # a class is autowired
        "mailer": {
            "class": Mailer,
            "autowire": False,                  # defaults to True
            "args": ["@transport", "noreply"],  # "@id" arguments become references
            "tags": ["mail"],
        },
        "clock": {"factory": lambda container: SystemClock()},
        "db_alias": {"alias": "@database"},
    }
"""

import inspect
import logging
from collections.abc import Mapping
from typing import Any, Callable

from wirebox.container import ServiceContainer
from wirebox.domain import ServiceReference
from wirebox.errors import InvalidConfigurationError

__all__ = ["MappingLoader", "FactoryLoader", "string_or_service_reference"]

logger = logging.getLogger(__name__)

_REFERENCE_PREFIX = "@"


class MappingLoader:
    """Register services described by a mapping of service ids to configurations."""

    def __init__(self, container: ServiceContainer):
        self.container = container

    def load(self, services: Mapping[str, Any]) -> None:
        logger.debug("Loading %d service entries", len(services))
        for service_id, configuration in services.items():
            self._load_entry(service_id, configuration)

    def _load_entry(self, service_id: str, configuration: Any) -> None:
        if isinstance(configuration, str):
            if configuration.startswith(_REFERENCE_PREFIX):
                self.container.alias(service_id, configuration[1:])
            else:
                self.container.set(service_id, configuration)
        elif inspect.isclass(configuration):
            self.container.autowire(service_id, configuration)
        elif isinstance(configuration, Mapping):
            self._load_configuration(service_id, configuration)
        else:
            self.container.set(service_id, configuration)

    def _load_configuration(self, service_id: str, configuration: Mapping) -> None:
        tags = configuration.get("tags", [])

        if configuration.get("alias"):
            alias = configuration["alias"]
            if not isinstance(alias, str) or not alias.startswith(_REFERENCE_PREFIX):
                raise InvalidConfigurationError(
                    f"The alias provided for '{service_id}' is not a service id: {alias!r}"
                )
            self.container.alias(service_id, alias[1:])

        elif configuration.get("class"):
            class_definition = configuration["class"]
            if configuration.get("autowire", True):
                definition = self.container.autowire(service_id, class_definition)
            else:
                definition = self.container.register(
                    service_id, class_definition
                ).set_arguments(
                    [
                        string_or_service_reference(argument)
                        for argument in configuration.get("args") or []
                    ]
                )
            for tag in tags:
                definition.add_tag(tag)

        elif configuration.get("factory"):
            definition = self.container.register_factory(
                service_id, configuration["factory"]
            )
            for tag in tags:
                definition.add_tag(tag)

        else:
            raise InvalidConfigurationError(
                f"Invalid configuration for service id '{service_id}': "
                "expected one of 'alias', 'class' or 'factory'"
            )


class FactoryLoader:
    """Hand the container to a callback that performs the registrations itself.

    Example:
        >>> def configure(container):
        ...     container.set("dsn", "sqlite://")
        ...     container.autowire("database", Database)
        >>> FactoryLoader(container).load(configure)
    """

    def __init__(self, container: ServiceContainer):
        self.container = container

    def load(self, configure: Callable[[ServiceContainer], Any]) -> Any:
        return configure(self.container)


def string_or_service_reference(subject: Any) -> Any:
    """Turn ``"@id"`` into ``ServiceReference("id")``; leave anything else untouched."""
    if isinstance(subject, str) and subject.startswith(_REFERENCE_PREFIX):
        return ServiceReference(subject[1:])
    return subject

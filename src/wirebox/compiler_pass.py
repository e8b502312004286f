"""Compiler passes: bulk rewrites of definitions, run as soon as they are added."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from wirebox.container import ServiceContainer
from wirebox.container_aware import ContainerAware

__all__ = [
    "CompilerPass",
    "ContainerAwareCompilerPass",
    "TaggedMethodCallCompilerPass",
    "CONTAINER_AWARE_TAG",
]

logger = logging.getLogger(__name__)

CONTAINER_AWARE_TAG = "container_aware"


class CompilerPass(ABC):
    """A transformation applied to a container's definitions before they are built."""

    @abstractmethod
    def process(self, container: ServiceContainer) -> None:
        """Inspect and modify the container's definitions."""


class ContainerAwareCompilerPass(CompilerPass):
    """Inject the container into every ``container_aware`` tagged :class:`ContainerAware` service.

    Tagged definitions that build something else, including factories, are skipped.
    """

    def process(self, container: ServiceContainer) -> None:
        for service_id in container.find_tagged_service_ids(CONTAINER_AWARE_TAG):
            definition = container.get_definition(service_id)
            class_definition = definition.get_class()
            if class_definition is None or not issubclass(class_definition, ContainerAware):
                logger.debug(
                    "Skipping '%s': it is tagged %s but does not build a ContainerAware",
                    service_id,
                    CONTAINER_AWARE_TAG,
                )
                continue
            definition.add_method_call("set_container", [container])


class TaggedMethodCallCompilerPass(CompilerPass):
    """Queue the same method call on every service carrying a tag.

    Args:
        tag: The tag selecting the definitions to modify.
        method: The name of the method to call on each built service.
        arguments: Arguments for the call; :class:`ServiceReference` entries are
            resolved when the service is built.

    Example:
        >>> container.add_compiler_pass(
        ...     TaggedMethodCallCompilerPass("needs_clock", "set_clock", [ServiceReference("clock")])
        ... )
    """

    def __init__(self, tag: str, method: str, arguments: Optional[Sequence[Any]] = None):
        self._tag = tag
        self._method = method
        self._arguments = list(arguments or [])

    def process(self, container: ServiceContainer) -> None:
        for service_id in container.find_tagged_service_ids(self._tag):
            container.get_definition(service_id).add_method_call(
                self._method, self._arguments
            )

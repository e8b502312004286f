"""Mixin for services that need to look up other services themselves."""

from typing import Any, Optional

from wirebox.container import ServiceContainer
from wirebox.errors import InvalidContainerError

__all__ = ["ContainerAware"]


class ContainerAware:
    """
    Marks a service as wanting the container injected after construction.

    Tag the definition with ``container_aware`` and register a
    :class:`~wirebox.compiler_pass.ContainerAwareCompilerPass`; the pass queues a
    ``set_container`` call so the container is attached once the service is built.
    """

    container: Optional[ServiceContainer] = None

    def set_container(self, container: ServiceContainer) -> None:
        if not isinstance(container, ServiceContainer):
            raise InvalidContainerError(f"Invalid container: {container!r}")
        self.container = container

    def get(self, service_id: str) -> Any:
        if self.container is None:
            raise InvalidContainerError(
                f"{type(self).__name__} has no container attached"
            )
        return self.container.get(service_id)

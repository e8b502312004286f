"""Value types shared by the container, its definitions and the parameter extractor."""

from dataclasses import dataclass, field
from typing import Any

__all__ = ["ServiceReference", "MethodCall", "Parameter", "ParsedDeclaration"]


@dataclass(frozen=True)
class ServiceReference:
    """Marks a constructor or method argument as another service rather than a literal.

    When a definition is materialised, each reference is replaced by the service the
    container resolves for ``service_id``. Any argument that is not a reference is
    passed through unchanged.

    Attributes:
        service_id: The id of the service to inject.

    Example:
        >>> container.register("mailer", Mailer).set_arguments(
        ...     [ServiceReference("transport"), "noreply@example.com"]
        ... )
    """

    service_id: str

    def get_service_id(self) -> str:
        return self.service_id


@dataclass(frozen=True)
class MethodCall:
    """A method to invoke on a freshly built service, with its (unresolved) arguments."""

    method: str
    arguments: tuple[Any, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Parameter:
    """A single declared parameter of a constructor or function."""

    name: str
    has_default: bool = False


@dataclass(frozen=True)
class ParsedDeclaration:
    """
    The structural description of a class or function recovered without calling it.

    Attributes:
        name: The declared name of the class or function.
        kind: Either ``"class"`` or ``"function"``.
        is_subclassed: Whether a class derives from anything other than ``object``.
        has_constructor: Whether a class (or one of its ancestors) defines ``__init__``.
            Always false for functions.
        parameters: The declared parameters, in order, with the receiver removed.
    """

    name: str
    kind: str
    is_subclassed: bool
    has_constructor: bool
    parameters: tuple[Parameter, ...]

    @property
    def argument_names(self) -> list[str]:
        return [parameter.name for parameter in self.parameters]

    @property
    def arity(self) -> tuple[int, int]:
        """The (required, total) number of positional arguments accepted."""
        required = sum(1 for parameter in self.parameters if not parameter.has_default)
        return required, len(self.parameters)

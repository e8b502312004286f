"""Exceptions raised by the service container and its collaborators.

Every error is a configuration problem: nothing here is retried, and each one
carries a stable ``code`` that callers can match on instead of the message.
"""

from typing import Optional, Sequence

__all__ = [
    "DependencyError",
    "DuplicateServiceIdError",
    "ContainerFrozenError",
    "AliasTargetMissingError",
    "AliasAlreadyRegisteredError",
    "ServiceNotFoundError",
    "EmptyContainerError",
    "DefinitionNotFoundError",
    "CyclicalDependencyError",
    "InvalidClassDefinitionError",
    "MissingClassDefinitionError",
    "UnknownAutowireDependencyError",
    "ArgumentCountMismatchError",
    "UndefinedMethodCallError",
    "UnparseableDeclarationError",
    "AnonymousDeclarationError",
    "UnsupportedParameterSyntaxError",
    "MissingConstructorError",
    "InvalidContainerError",
    "InvalidConfigurationError",
]


class DependencyError(Exception):
    """Raised when a service cannot be registered, resolved or built."""

    code = "dependency_error"


class DuplicateServiceIdError(DependencyError):
    code = "duplicate_service_id"

    def __init__(self, service_id: str):
        super().__init__(
            f"Service id '{service_id}' has already been registered in this container"
        )
        self.service_id = service_id


class ContainerFrozenError(DependencyError):
    code = "container_frozen"

    def __init__(self, service_id: Optional[str] = None, action: str = "register"):
        target = f" '{service_id}'" if service_id else ""
        super().__init__(f"Cannot {action}{target}: the service container is frozen")
        self.service_id = service_id


class AliasTargetMissingError(DependencyError):
    code = "alias_target_missing"

    def __init__(self, alias: str, target: str):
        super().__init__(
            f"Cannot create alias '{alias}': the original service '{target}' doesn't exist"
        )
        self.alias = alias
        self.target = target


class AliasAlreadyRegisteredError(DependencyError):
    code = "alias_already_registered"

    def __init__(self, alias: str):
        super().__init__(f"Cannot register alias '{alias}': that name is already taken")
        self.alias = alias


class ServiceNotFoundError(DependencyError, LookupError):
    code = "service_not_found"

    def __init__(self, service_id: str, suggestion: str):
        super().__init__(
            f"Service '{service_id}' not found, did you actually mean '{suggestion}'?"
        )
        self.service_id = service_id
        self.suggestion = suggestion


class EmptyContainerError(DependencyError, LookupError):
    code = "empty_container"

    def __init__(self, service_id: str):
        super().__init__(
            f"Cannot fetch service '{service_id}': no services have been registered in this container"
        )
        self.service_id = service_id


class DefinitionNotFoundError(DependencyError, LookupError):
    code = "definition_not_found"

    def __init__(self, service_id: str):
        super().__init__(f"No definition registered for service '{service_id}'")
        self.service_id = service_id


class CyclicalDependencyError(DependencyError):
    code = "cyclical_dependency"

    def __init__(self, path: Sequence[str]):
        self.path = list(path)
        super().__init__(
            f"Cyclical service dependency detected on ({' -> '.join(self.path)})"
        )


class InvalidClassDefinitionError(DependencyError):
    code = "invalid_class_definition"


class MissingClassDefinitionError(DependencyError):
    code = "missing_class_definition"


class UnknownAutowireDependencyError(DependencyError):
    code = "unknown_autowire_dependency"

    def __init__(self, class_name: str, index: int, parameter_name: str):
        super().__init__(
            f"Autowiring error for {class_name}: constructor argument at index {index} "
            f"is named '{parameter_name}' but no matching service was found"
        )
        self.class_name = class_name
        self.index = index
        self.parameter_name = parameter_name


class ArgumentCountMismatchError(DependencyError):
    code = "argument_count_mismatch"


class UndefinedMethodCallError(DependencyError):
    code = "undefined_method_call"


class UnparseableDeclarationError(DependencyError):
    code = "unparseable_declaration"


class AnonymousDeclarationError(DependencyError):
    code = "anonymous_declaration"


class UnsupportedParameterSyntaxError(DependencyError):
    code = "unsupported_parameter_syntax"


class MissingConstructorError(DependencyError):
    code = "missing_constructor"


class InvalidContainerError(DependencyError):
    code = "invalid_container"


class InvalidConfigurationError(DependencyError):
    code = "invalid_configuration"

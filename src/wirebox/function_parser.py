"""Recover the declared parameter names of classes and functions without calling them.

Autowiring matches constructor parameter names against service ids, so the names
must be read from the declaration itself. Python exposes that structure directly
through :func:`inspect.signature`; no source text is parsed.
"""

import inspect
from typing import Any, Callable

from wirebox.domain import Parameter, ParsedDeclaration
from wirebox.errors import (
    AnonymousDeclarationError,
    MissingConstructorError,
    UnparseableDeclarationError,
    UnsupportedParameterSyntaxError,
)

__all__ = ["parse", "extract_constructor_arguments"]

_UNSUPPORTED_KINDS = {
    inspect.Parameter.VAR_POSITIONAL: "*args",
    inspect.Parameter.VAR_KEYWORD: "**kwargs",
    inspect.Parameter.KEYWORD_ONLY: "keyword-only",
}


def parse(target: Any) -> ParsedDeclaration:
    """Describe a class or function declaration.

    Args:
        target: A class, a named function or a bound method.

    Returns:
        The :class:`ParsedDeclaration` for ``target``. For classes, the parameters
        are those of the nearest ``__init__`` in the MRO with ``self`` removed.

    Raises:
        UnparseableDeclarationError: If ``target`` is neither a class nor a function,
            or has no introspectable signature.
        AnonymousDeclarationError: If ``target`` has no usable name (e.g. a lambda).
        UnsupportedParameterSyntaxError: If a parameter is variadic or keyword-only.

    Example:
        >>> def make_mailer(transport, sender="noreply"): ...
        >>> parse(make_mailer).argument_names
        ['transport', 'sender']
    """
    if inspect.isclass(target):
        name = _declared_name(target)
        # Builtin slot wrappers (object, list, dict...) don't count as constructors.
        has_constructor = inspect.isfunction(target.__init__)
        parameters = (
            _parameters_of(target.__init__, name, drop_receiver=True)
            if has_constructor
            else ()
        )
        return ParsedDeclaration(
            name,
            "class",
            any(base is not object for base in target.__bases__),
            has_constructor,
            parameters,
        )

    if inspect.isfunction(target) or inspect.ismethod(target):
        name = _declared_name(target)
        return ParsedDeclaration(
            name, "function", False, False, _parameters_of(target, name)
        )

    raise UnparseableDeclarationError(
        f"Input was neither a class nor a function declaration: {target!r}"
    )


def extract_constructor_arguments(target: Any) -> list[str]:
    """Return the constructor parameter names of a class, or the parameters of a function.

    Raises:
        MissingConstructorError: If ``target`` is a class that never defines ``__init__``.
    """
    parsed = parse(target)
    if parsed.kind == "class" and not parsed.has_constructor:
        raise MissingConstructorError(f"Class {parsed.name} is missing a constructor")
    return parsed.argument_names


def _declared_name(target: Any) -> str:
    name = getattr(target, "__name__", "")
    if not name or name == "<lambda>":
        raise AnonymousDeclarationError(
            f"Declaration must have a name: {target!r}"
        )
    return name


def _parameters_of(
    func: Callable, declared_name: str, drop_receiver: bool = False
) -> tuple[Parameter, ...]:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError) as e:
        raise UnparseableDeclarationError(
            f"Cannot read the signature of {declared_name}: {e}"
        ) from e

    parameters = list(signature.parameters.values())
    if drop_receiver:
        parameters = parameters[1:]

    for parameter in parameters:
        if parameter.kind in _UNSUPPORTED_KINDS:
            raise UnsupportedParameterSyntaxError(
                f"Unsupported {_UNSUPPORTED_KINDS[parameter.kind]} parameter "
                f"'{parameter.name}' in {declared_name}"
            )

    return tuple(
        Parameter(parameter.name, parameter.default is not inspect.Parameter.empty)
        for parameter in parameters
    )

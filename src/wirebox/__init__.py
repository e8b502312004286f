"""Wirebox dependency injection container.

Wirebox is a small inversion-of-control container. Services are registered under
string ids, either as finished values or as definitions describing how to build them,
and are built lazily, at most once each, the first time they are requested.

Key Features:
    - Explicit wiring with service references, or autowiring by parameter name
    - Factories, aliases, tags and post-construction method calls
    - Compiler passes for bulk rewriting of tagged definitions
    - Eager compilation that reports missing services and dependency cycles
    - Freezing against further registration

Basic Usage:
    >>> from wirebox.container import ServiceContainer
    >>>
    >>> container = ServiceContainer()
    >>> container.set("dsn", "sqlite://")
    >>>
    >>> @container.provides("database")
    ... class Database:
    ...     def __init__(self, dsn):
    ...         self.dsn = dsn
    >>>
    >>> container.compile()
    >>> container.get("database").dsn
    'sqlite://'

The framework consists of several core modules:
    - container: Service registration, lookup and compilation
    - definition: Per-service build recipes and materialisation
    - function_parser: Constructor parameter name extraction
    - domain: Value types (ServiceReference, MethodCall, ParsedDeclaration)
    - compiler_pass: Compiler pass base class and built-in passes
    - container_aware: Mixin for services that receive the container
    - loaders: Mapping and callback based registration
    - errors: Framework-specific exceptions
"""

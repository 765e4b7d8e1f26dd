# file: lazy_services/definitions.py
"""
Service definitions and their normalization.

A host declares services as a mapping of name -> definition, where a
definition is one of:

    'reports': ReportService                     # class or factory callable
    'mailer':  'mailer'                          # key in a factory registry
    'cache':   {'type': CacheService, 'ttl': 60} # type plus options
    'audit':   ServiceDefinition(AuditService, {'level': 'full'})
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Tuple, Union
from lazy_services.exceptions import ConfigurationError, ServiceNotFoundError
from lazy_services.factory_registry import ServiceFactory, ServiceFactoryRegistry, is_host_bound

TYPE_KEY = "type"

TypeIdentifier = Union[str, Callable[..., Any]]

@dataclass
class ServiceDefinition:
    """Typed alternative to the ``{'type': ..., **options}`` mapping form."""
    type: TypeIdentifier
    options: Dict[str, Any] = field(default_factory=dict)


Definition = Union[TypeIdentifier, Mapping[str, Any], ServiceDefinition]


def split_definition(name: str, definition: Definition) -> Tuple[TypeIdentifier, Dict[str, Any]]:
    """
    Splits a definition into its type identifier and a fresh options dict.
    The caller's definition is never mutated.
    """
    if isinstance(definition, ServiceDefinition):
        type_id, options = definition.type, dict(definition.options)
    elif isinstance(definition, Mapping):
        options = dict(definition)
        type_id = options.pop(TYPE_KEY, None)
    elif isinstance(definition, str) or callable(definition):
        type_id, options = definition, {}
    else:
        raise ConfigurationError(
            f"Invalid definition for service '{name}': expected a type, a mapping "
            f"or a ServiceDefinition, got {type(definition).__name__}."
        )

    if type_id is None:
        raise ConfigurationError(f"Definition for service '{name}' must specify a '{TYPE_KEY}'.")
    return type_id, options


def resolve_factory(name: str, type_id: TypeIdentifier, factories: ServiceFactoryRegistry) -> ServiceFactory:
    """Turns a type identifier into a ServiceFactory."""
    if isinstance(type_id, str):
        try:
            return factories.get(type_id)
        except ServiceNotFoundError as e:
            raise ConfigurationError(
                f"Definition for service '{name}' names unknown type '{type_id}'."
            ) from e

    if not callable(type_id):
        raise ConfigurationError(
            f"Definition for service '{name}' has a non-callable type: {type_id!r}."
        )
    return ServiceFactory(getattr(type_id, "__qualname__", repr(type_id)), type_id, is_host_bound(type_id))


def normalize_definition(name: str, definition: Definition,
                         factories: ServiceFactoryRegistry) -> Tuple[ServiceFactory, Dict[str, Any]]:
    """Returns (factory, declared options) for ``definition``."""
    type_id, options = split_definition(name, definition)
    return resolve_factory(name, type_id, factories), options

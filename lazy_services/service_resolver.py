# file: lazy_services/service_resolver.py

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional
from lazy_services import Service
from lazy_services.definitions import Definition, normalize_definition
from lazy_services.exceptions import ConfigurationError, ServiceNotFoundError
from lazy_services.factory_registry import ServiceFactoryRegistry, registry as default_registry

class ServiceResolver:
    """
    Lazily builds and caches the services declared by one host object.

    The declarations are re-read on every miss, so a host can compute them
    dynamically. Once a name has been built, the same instance is returned
    for the rest of the host's life, whatever options are passed later.

    Not thread-safe: one resolver belongs to one host.
    """
    def __init__(self, host: Any,
                 declarations: Callable[[], Mapping[str, Definition]],
                 factories: Optional[ServiceFactoryRegistry] = None):
        self.host = host
        self._declarations = declarations
        self.factories = factories if factories is not None else default_registry
        self._instances: Dict[str, Service] = {}
        self.logger = logging.getLogger(self.__class__.__name__)

    def declarations(self) -> Dict[str, Definition]:
        """Returns a fresh copy of the host's declared services."""
        return dict(self._declarations() or {})

    def resolve(self, name: str, extra_options: Optional[Mapping[str, Any]] = None) -> Optional[Service]:
        """
        Returns the service called ``name``, building it on first use.

        Returns None when ``name`` is not declared; whether that is an
        error is up to the caller. ``extra_options`` are merged over the
        declared options (call-supplied keys win) but only when the
        service is built; they are ignored for a cached service.

        Raises:
            ConfigurationError: the definition is malformed or the built
                                object is not a Service.
        """
        if name in self._instances:
            self.logger.debug(f"Service '{name}' served from cache.")
            return self._instances[name]

        definition = (self._declarations() or {}).get(name)
        if definition is None:
            return None

        try:
            factory, options = normalize_definition(name, definition, self.factories)
        except ConfigurationError as e:
            self.logger.error(f"Bad definition for service '{name}' on {type(self.host).__name__}: {e}")
            raise

        if isinstance(extra_options, Mapping):
            options.update(extra_options)

        if factory.requires_host:
            service = factory.factory(self.host, options)
        else:
            service = factory.factory(options)

        if not isinstance(service, Service):
            self.logger.error(f"Service '{name}' built a {type(service).__name__}, which is not a Service.")
            raise ConfigurationError(
                f"Service '{name}' ({factory.name}) must implement {Service.__module__}.{Service.__name__}."
            )

        self.logger.info(f"Service '{name}' created ({factory.name}) for {type(self.host).__name__}.")
        self._instances[name] = service
        return service

    def get(self, name: str, options: Optional[Mapping[str, Any]] = None) -> Service:
        """Like resolve(), but a missing service raises ServiceNotFoundError."""
        service = self.resolve(name, options)
        if service is None:
            raise ServiceNotFoundError(f"Service '{name}' is not declared on {type(self.host).__name__}.")
        return service

    def is_resolved(self, name: str) -> bool:
        """True once ``name`` has been built and cached."""
        return name in self._instances

    def resolved_names(self) -> List[str]:
        return list(self._instances)

    def __getitem__(self, name: str) -> Service:
        """Allows dictionary-style access, e.g., resolver['reports']"""
        return self.get(name)

    def __contains__(self, name: str) -> bool:
        """Declared or already cached."""
        return name in self._instances or name in (self._declarations() or {})

# file: lazy_services/factory_registry.py

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List
from lazy_services import HOST_BOUND_BASES
from lazy_services.exceptions import ServiceNotFoundError

@dataclass(frozen=True)
class ServiceFactory:
    """A registered constructor plus how it wants to be called."""
    name: str
    factory: Callable[..., Any]
    requires_host: bool = False


def is_host_bound(factory: Callable[..., Any]) -> bool:
    """True if ``factory`` is a class from one of the host-bound categories."""
    return inspect.isclass(factory) and issubclass(factory, HOST_BOUND_BASES)


class ServiceFactoryRegistry:
    """
    Maps string type identifiers to service constructors.

    Definitions can name a service type by string (e.g. in a JSON config
    file); the resolver looks the string up here instead of importing
    anything by path.
    """
    def __init__(self):
        self._factories: Dict[str, ServiceFactory] = {}
        self.logger = logging.getLogger(self.__class__.__name__)

    def register(self, name: str, factory: Callable[..., Any], requires_host: bool = False) -> ServiceFactory:
        """
        Registers a factory under ``name``.

        Args:
            name (str): The type identifier used in service definitions.
            factory (Callable): A class or function that builds the service.
            requires_host (bool): Call the factory as ``factory(host, options)``
                                  instead of ``factory(options)``. Classes
                                  derived from the model/controller service
                                  bases always get the host.
        """
        if name in self._factories:
            self.logger.warning(f"Service factory '{name}' is being re-registered.")

        entry = ServiceFactory(name, factory, requires_host or is_host_bound(factory))
        self._factories[name] = entry
        return entry

    def get(self, name: str) -> ServiceFactory:
        try:
            return self._factories[name]
        except KeyError:
            raise ServiceNotFoundError(f"Service factory '{name}' not registered.") from None

    def names(self) -> List[str]:
        return list(self._factories)

    def __getitem__(self, name: str) -> ServiceFactory:
        """Allows dictionary-style access, e.g., registry['mailer']"""
        return self.get(name)

    def __contains__(self, name: str) -> bool:
        """Allows 'in' check, e.g., 'mailer' in registry"""
        return name in self._factories

# Default registry for start-up wiring; hosts can point at their own.
registry = ServiceFactoryRegistry()

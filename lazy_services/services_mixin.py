# file: lazy_services/services_mixin.py

from typing import Any, Dict, Mapping, Optional
from lazy_services import Service
from lazy_services.definitions import Definition
from lazy_services.exceptions import UnknownAttributeError, UnknownMethodError
from lazy_services.factory_registry import ServiceFactoryRegistry
from lazy_services.service_resolver import ServiceResolver

ACCESSOR_PREFIX_LENGTH = 3  # "get", "new", ...

_RESOLVER_ATTR = "_service_resolver"
_DECLARING_ATTR = "_declaring_services"


def service_name_from_accessor(method_name: str) -> str:
    """
    Derives a service name from an accessor method name.

    Drops the three-character prefix, then one leading underscore, then
    lower-cases the first character: ``getReports`` and ``get_reports``
    both give ``reports``. Returns "" if nothing is left.
    """
    rest = method_name[ACCESSOR_PREFIX_LENGTH:]
    if rest.startswith("_"):
        rest = rest[1:]
    return rest[:1].lower() + rest[1:]


class ServicesMixin:
    """
    Gives a class lazily-built, per-instance services.

    Subclasses list their services in ``declare_services()``::

        class ReportController(ServicesMixin, FrameworkObject):
            def declare_services(self):
                return {
                    'reports': ReportService,
                    'mailer': {'type': 'mailer', 'sender': 'noreply@example.com'},
                }

        controller.reports                      # built on first access
        controller.getMailer({'retries': 3})    # accessor form, options on first build

    The host's own lookup always wins: normal attributes first, then the
    ``__getattr__`` of the next base class (if any), and only then services.

    With attribute syntax an undeclared accessor fails on lookup, so
    ``controller.getNothing({...})`` raises UnknownAttributeError before
    anything is called. ``invoke('getNothing', {...})`` raises
    UnknownMethodError. Both are AttributeErrors.
    """

    # Registry used for string type identifiers. None = the module default.
    service_factories: Optional[ServiceFactoryRegistry] = None

    def declare_services(self) -> Dict[str, Definition]:
        """
        Returns the services this object offers, keyed by name.
        Called on every lookup miss; the result is not cached.
        """
        return {}

    @property
    def service_resolver(self) -> ServiceResolver:
        """The resolver holding this object's service instances."""
        resolver = self.__dict__.get(_RESOLVER_ATTR)
        if resolver is None:
            resolver = ServiceResolver(self, self._declared_services, self.service_factories)
            self.__dict__[_RESOLVER_ATTR] = resolver
        return resolver

    def _declared_services(self) -> Dict[str, Definition]:
        # Attribute misses inside declare_services() must not resolve services.
        self.__dict__[_DECLARING_ATTR] = True
        try:
            return self.declare_services()
        finally:
            self.__dict__.pop(_DECLARING_ATTR, None)

    def _base_getattr(self, name: str) -> Any:
        """The next base class's ``__getattr__``; AttributeError if there is none."""
        base_getattr = getattr(super(), "__getattr__", None)
        if base_getattr is None:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")
        return base_getattr(name)

    def _host_attribute(self, name: str) -> Any:
        try:
            return super().__getattribute__(name)
        except AttributeError:
            return self._base_getattr(name)

    def get_attribute(self, name: str) -> Any:
        """
        Explicit form of ``getattr(self, name)``: the host's own attribute
        first, then a service called ``name``.
        """
        try:
            return self._host_attribute(name)
        except AttributeError as e:
            return self._resolve_attribute(name, e)

    def invoke(self, name: str, *args, **kwargs) -> Any:
        """
        Explicit form of ``self.<name>(*args, **kwargs)``: calls the host's
        method if there is one; otherwise treats ``name`` as a service
        accessor (see ``service_name_from_accessor``) and returns the
        service, built with ``args[0]`` as extra options when it is a mapping.
        """
        try:
            method = self._host_attribute(name)
        except AttributeError as e:
            return self._resolve_accessor(name, args, e)
        if not callable(method):
            error = AttributeError(f"'{type(self).__name__}' attribute '{name}' is not a method")
            return self._resolve_accessor(name, args, error)
        return method(*args, **kwargs)

    def _resolve_attribute(self, name: str, error: AttributeError) -> Service:
        service = self.service_resolver.resolve(name)
        if service is None:
            raise UnknownAttributeError(
                f"Getting unknown property: {type(self).__name__}.{name}"
            ) from error
        return service

    def _resolve_accessor(self, name: str, args: tuple, error: AttributeError) -> Service:
        service_name = service_name_from_accessor(name)
        options = args[0] if args and isinstance(args[0], Mapping) else None
        service = self.service_resolver.resolve(service_name, options) if service_name else None
        if service is None:
            raise UnknownMethodError(
                f"Calling unknown method: {type(self).__name__}.{name}()"
            ) from error
        return service

    def __getattr__(self, name: str) -> Any:
        # Only reached after normal lookup has failed.
        try:
            return self._base_getattr(name)
        except AttributeError as e:
            error = e

        if name.startswith("__") or name == _RESOLVER_ATTR or self.__dict__.get(_DECLARING_ATTR):
            raise error

        resolver = self.service_resolver
        service_name = service_name_from_accessor(name)
        if name not in resolver and service_name and service_name in resolver:
            def accessor(*args, **kwargs):
                return self._resolve_accessor(name, args, error)
            accessor.__name__ = name
            return accessor
        return self._resolve_attribute(name, error)

# file: lazy_services/__init__.py

from abc import ABC
from typing import Any, Dict, Mapping, Optional

class Service(ABC):
    """
    Marker base for everything a host can resolve by name.

    There are no required members. Third-party classes can opt in
    without inheriting via ``Service.register(SomeClass)``.
    """
    pass


class BaseService(Service):
    """
    Convenience base for plain services.

    Each option in ``config`` is set as an instance attribute, then
    ``init()`` is called so subclasses can finish setting up once the
    options are in place.
    """

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self.config: Dict[str, Any] = dict(config or {})
        for key, value in self.config.items():
            setattr(self, key, value)
        self.init()

    def init(self):
        """Called at the end of construction."""
        pass # Optional to implement


class _HostBoundService(BaseService):
    # Services of this kind are constructed as Type(host, options).

    def __init__(self, host: Any, config: Optional[Mapping[str, Any]] = None):
        self.host = host
        super().__init__(config)


class BaseModelService(_HostBoundService):
    """
    A service working on behalf of a model object.
    The owning model is available as ``self.model``.
    """

    @property
    def model(self) -> Any:
        return self.host


class BaseControllerService(_HostBoundService):
    """
    A service working on behalf of a controller object.
    The owning controller is available as ``self.controller``.
    """

    @property
    def controller(self) -> Any:
        return self.host


# Base categories whose constructors take the host as first argument.
HOST_BOUND_BASES = (BaseModelService, BaseControllerService)

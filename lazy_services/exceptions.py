# file: lazy_services/exceptions.py
"""
Defines the exception hierarchy for service resolution.
"""

class ServiceError(Exception):
    """Base exception for all service-resolution errors."""
    pass

# --- Configuration Errors ---
class ConfigurationError(ServiceError):
    """
    A service definition (or config file) is malformed, names an unknown
    type, or builds an object that is not a Service.
    """
    pass

# --- Lookup Errors ---
class ServiceNotFoundError(ServiceError, KeyError):
    """A service or factory name is not declared/registered."""

    def __str__(self):
        # KeyError quotes its message; keep it readable.
        return str(self.args[0]) if self.args else ""

class UnknownAttributeError(ServiceError, AttributeError):
    """Normal attribute lookup failed and no service matched the name."""
    pass

class UnknownMethodError(ServiceError, AttributeError):
    """Normal method lookup failed and no service matched the accessor."""
    pass

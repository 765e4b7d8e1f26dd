# file: tests/test_service_resolver.py

import logging
import pytest
from unittest.mock import MagicMock

from lazy_services import Service
from lazy_services.definitions import ServiceDefinition
from lazy_services.exceptions import ConfigurationError, ServiceNotFoundError
from lazy_services.service_resolver import ServiceResolver
from sample_services import (
    AuthControllerService, NotAService, OrderModelService, RecordingService, ReportService
)

@pytest.fixture
def host():
    return MagicMock(name="host")

@pytest.fixture
def make_resolver(host, factories):
    """Builds a resolver over a fixed declarations dict."""
    def _make(declarations):
        return ServiceResolver(host, lambda: declarations, factories)
    return _make

def test_resolve_builds_on_first_use(make_resolver):
    resolver = make_resolver({"reports": ReportService})

    assert not resolver.is_resolved("reports")
    service = resolver.resolve("reports")

    assert isinstance(service, ReportService)
    assert service.initialized is True
    assert resolver.is_resolved("reports")
    assert resolver.resolved_names() == ["reports"]

def test_resolve_returns_cached_instance_and_ignores_later_options(make_resolver):
    resolver = make_resolver({"rec": {"type": RecordingService, "a": 1}})

    first = resolver.resolve("rec", {"a": 2})
    second = resolver.resolve("rec", {"a": 99, "b": 5})

    assert second is first
    assert second.config == {"a": 2}

def test_resolve_undeclared_returns_none(make_resolver):
    resolver = make_resolver({"reports": ReportService})

    assert resolver.resolve("missing") is None
    assert resolver.resolved_names() == []

def test_bare_definition_gets_empty_options(make_resolver):
    resolver = make_resolver({"rec": RecordingService})

    assert resolver.resolve("rec").config == {}

def test_structured_definition_strips_type_key(make_resolver):
    declarations = {"rec": {"type": RecordingService, "a": 1, "b": 2}}
    resolver = make_resolver(declarations)

    service = resolver.resolve("rec")

    assert service.config == {"a": 1, "b": 2}
    assert service.a == 1 and service.b == 2
    # The declaration itself is left alone.
    assert declarations["rec"]["type"] is RecordingService

def test_call_options_override_declared_options(make_resolver):
    resolver = make_resolver({"rec": {"type": RecordingService, "a": 1, "b": 2}})

    service = resolver.resolve("rec", {"b": 3, "c": 4})

    assert service.config == {"a": 1, "b": 3, "c": 4}

def test_non_mapping_extra_options_are_ignored(make_resolver):
    resolver = make_resolver({"rec": {"type": RecordingService, "a": 1}})

    service = resolver.resolve("rec", ["not", "a", "mapping"])

    assert service.config == {"a": 1}

def test_service_definition_record(make_resolver):
    options = {"level": "full"}
    resolver = make_resolver({"rec": ServiceDefinition(RecordingService, options)})

    service = resolver.resolve("rec", {"extra": True})

    assert service.config == {"level": "full", "extra": True}
    assert options == {"level": "full"}

def test_string_type_uses_factory_registry(make_resolver):
    resolver = make_resolver({"rec": {"type": "recording", "x": 1}})

    service = resolver.resolve("rec")

    assert isinstance(service, RecordingService)
    assert service.config == {"x": 1}

def test_unknown_registry_key_raises_configuration_error(make_resolver):
    resolver = make_resolver({"rec": "no_such_factory"})

    with pytest.raises(ConfigurationError, match="unknown type 'no_such_factory'"):
        resolver.resolve("rec")

@pytest.mark.parametrize("definition", [
    {"a": 1},
    {"type": None, "a": 1},
    42,
    ["type", RecordingService],
])
def test_malformed_definition_raises_configuration_error(make_resolver, definition):
    resolver = make_resolver({"bad": definition})

    with pytest.raises(ConfigurationError):
        resolver.resolve("bad")
    assert not resolver.is_resolved("bad")

def test_missing_type_message(make_resolver):
    resolver = make_resolver({"bad": {"a": 1}})

    with pytest.raises(ConfigurationError, match="must specify a 'type'"):
        resolver.resolve("bad")

def test_non_service_instance_is_rejected_and_not_cached(make_resolver):
    resolver = make_resolver({"plain": NotAService})

    with pytest.raises(ConfigurationError, match="must implement"):
        resolver.resolve("plain")
    assert not resolver.is_resolved("plain")
    # Still rejected on the next attempt, not served from cache.
    with pytest.raises(ConfigurationError):
        resolver.resolve("plain")

def test_virtually_registered_service_is_accepted(make_resolver):
    class External:
        def __init__(self, config):
            self.config = config

    Service.register(External)
    resolver = make_resolver({"ext": External})

    assert isinstance(resolver.resolve("ext"), External)

def test_model_and_controller_services_receive_host(make_resolver, host):
    resolver = make_resolver({
        "orders": {"type": OrderModelService, "page_size": 10},
        "auth": AuthControllerService,
        "plain": RecordingService,
    })

    orders = resolver.resolve("orders")
    auth = resolver.resolve("auth")
    plain = resolver.resolve("plain")

    assert orders.model is host
    assert orders.page_size == 10
    assert auth.controller is host
    assert not hasattr(plain, "host")

def test_registry_factory_flagged_requires_host(host, factories):
    factory = MagicMock(return_value=RecordingService())
    factories.register("custom", factory, requires_host=True)
    resolver = ServiceResolver(host, lambda: {"custom": {"type": "custom", "k": "v"}}, factories)

    resolver.resolve("custom")

    factory.assert_called_once_with(host, {"k": "v"})

def test_factory_function_definition(make_resolver):
    calls = []

    def build(options):
        calls.append(options)
        return RecordingService(options)

    resolver = make_resolver({"built": {"type": build, "n": 1}})

    assert resolver.resolve("built").config == {"n": 1}
    assert resolver.resolve("built").config == {"n": 1}
    assert calls == [{"n": 1}]

def test_constructor_errors_propagate_and_nothing_is_cached(make_resolver):
    def broken(options):
        raise RuntimeError("boom")

    resolver = make_resolver({"broken": broken})

    with pytest.raises(RuntimeError, match="boom"):
        resolver.resolve("broken")
    assert not resolver.is_resolved("broken")

def test_declarations_are_read_on_every_miss(host, factories):
    declarations = {}
    resolver = ServiceResolver(host, lambda: dict(declarations), factories)

    assert resolver.resolve("rec") is None
    declarations["rec"] = RecordingService

    assert isinstance(resolver.resolve("rec"), RecordingService)

def test_none_declarations_are_treated_as_empty(host, factories):
    resolver = ServiceResolver(host, lambda: None, factories)

    assert resolver.resolve("anything") is None
    assert "anything" not in resolver
    assert resolver.declarations() == {}

def test_get_raises_service_not_found(make_resolver):
    resolver = make_resolver({"rec": RecordingService})

    assert isinstance(resolver.get("rec"), RecordingService)
    assert resolver["rec"] is resolver.get("rec")
    with pytest.raises(ServiceNotFoundError, match="'missing' is not declared"):
        resolver.get("missing")
    with pytest.raises(KeyError):
        resolver["missing"]

def test_contains_checks_declared_and_cached(make_resolver):
    resolver = make_resolver({"rec": RecordingService})

    assert "rec" in resolver
    assert "missing" not in resolver

def test_default_registry_is_used_when_none_given(host):
    from lazy_services.factory_registry import registry

    resolver = ServiceResolver(host, dict)

    assert resolver.factories is registry

def test_creation_is_logged(make_resolver, caplog):
    caplog.set_level(logging.DEBUG, logger="ServiceResolver")
    resolver = make_resolver({"rec": RecordingService})

    resolver.resolve("rec")
    resolver.resolve("rec")

    assert "Service 'rec' created" in caplog.text
    assert "Service 'rec' served from cache." in caplog.text

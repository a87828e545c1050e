"""Tests for the reference node types."""

from pathlib import Path

import pytest

from wiregen import Capability, Constructor, IRGraph, MissingCapabilityError, ServiceInterface, supports
from wiregen.plugins import ConfigValue, HealthCheckWrapper, Process, WorkflowService


def make_service(name: str = "greeter") -> WorkflowService:
    return WorkflowService(
        name,
        module_path=Path("workflow"),
        interface=ServiceInterface(name="Greeter", package="greeter.service"),
        constructor=Constructor(package="greeter.service", name="new_greeter"),
    )


def test_every_plugin_has_a_valid_capability_set() -> None:
    graph = IRGraph()
    value = graph.add(ConfigValue("port", 8080))
    service = graph.add(make_service())
    wrapper = graph.add(HealthCheckWrapper("greeter_hc", service))
    graph.add(Process("proc", contained=[value, service, wrapper]))
    graph.freeze()
    assert len(graph) == 4


def test_config_value_is_only_instantiable() -> None:
    value = ConfigValue("port", 8080)
    assert value.value == 8080
    assert type(value).capabilities == frozenset({Capability.INSTANTIABLE})


def test_workflow_service_defaults_short_name_to_directory() -> None:
    service = WorkflowService(
        "svc",
        module_path="some/dir/user-lib",
        interface=ServiceInterface(name="Users", package="users"),
        constructor=Constructor(package="users", name="new_users"),
    )
    assert service.module_short_name == "user_lib"
    assert service.get_interface(None).name == "Users"


class TestHealthCheckWrapper:
    """Tests for the health-check wrapper node."""

    def test_wraps_services(self) -> None:
        service = make_service()
        wrapper = HealthCheckWrapper("greeter_hc", service)
        assert wrapper.wrapped is service
        assert wrapper.args == (service,)
        assert supports(wrapper, Capability.SERVICE)

    def test_rejects_non_service(self) -> None:
        """Should refuse to wrap a node that exposes no interface."""
        with pytest.raises(MissingCapabilityError, match=r"requires a service, but 'port' is a ConfigValue") as exc:
            HealthCheckWrapper("port_hc", ConfigValue("port", 8080))
        assert exc.value.node_path == ("port_hc", "port")


def test_process_name_is_cleaned() -> None:
    proc = Process("my-frontend", contained=[])
    assert proc.proc_name == "my_frontend"
    assert proc.kind == "Process"

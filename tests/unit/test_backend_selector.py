"""Unit tests for backend selection."""

import pytest

from zinasite.data.backend_selector import (
    Backend,
    BackendSelector,
    DeploymentSignals,
    Privilege,
    select_backend,
)

SERVER = DeploymentSignals(static_only=False, admin_surface=False)
STATIC = DeploymentSignals(static_only=True, admin_surface=False)
ADMIN = DeploymentSignals(static_only=False, admin_surface=True)


class TestDeploymentSignals:

    @pytest.mark.parametrize("host,path,static", [
        ("zina.github.io", "/", True),
        ("github.com", "/org/site", True),
        ("localhost", "/docs/index.html", True),
        ("localhost", "/index.html", False),
        ("example.org", "/", False),
    ])
    def test_static_detection(self, host, path, static):
        assert DeploymentSignals.from_location(host, path).static_only is static

    def test_admin_surface(self):
        assert DeploymentSignals.from_location("localhost", "/admin.html").admin_surface
        assert not DeploymentSignals.from_location("localhost", "/events.html").admin_surface


class TestSelectBackend:

    @pytest.mark.parametrize("privilege", list(Privilege))
    @pytest.mark.parametrize("ready", [True, False])
    def test_static_deployment_is_always_hosted(self, privilege, ready):
        assert select_backend(privilege, STATIC, ready) is Backend.HOSTED_DIRECT

    @pytest.mark.parametrize("privilege", [Privilege.READ_ADMIN, Privilege.WRITE])
    def test_privileged_is_hosted(self, privilege):
        assert select_backend(privilege, SERVER, False) is Backend.HOSTED_DIRECT

    def test_public_read_uses_gateway(self):
        assert select_backend(Privilege.READ_PUBLIC, SERVER, False) is Backend.GATEWAY

    def test_public_read_prefers_existing_client(self):
        assert select_backend(Privilege.READ_PUBLIC, SERVER, True) is Backend.HOSTED_DIRECT

    def test_admin_surface_precedence_is_opt_in(self):
        assert select_backend(Privilege.READ_PUBLIC, ADMIN, False) is Backend.GATEWAY
        assert select_backend(
            Privilege.READ_PUBLIC, ADMIN, False, admin_surface_reads_hosted=True
        ) is Backend.HOSTED_DIRECT

    def test_selector_checks_readiness_per_call(self):
        ready = {"value": False}
        selector = BackendSelector(SERVER, lambda: ready["value"])
        assert selector.select(Privilege.READ_PUBLIC) is Backend.GATEWAY
        ready["value"] = True
        assert selector.select(Privilege.READ_PUBLIC) is Backend.HOSTED_DIRECT

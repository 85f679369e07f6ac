"""Unit tests for the environment-sourced service configuration.

Covers:
- load_envs: happy path, broker list parsing, failover URL.
- Fail Fast: missing / malformed PORT and PRODUCTS_BROKER_SERVERS.
- ServiceEnvs immutability.
"""

from __future__ import annotations

import pytest
from django.core.exceptions import ImproperlyConfigured
from pydantic import ValidationError

from config.envs import ServiceEnvs, load_envs

pytestmark = pytest.mark.unit


@pytest.fixture()
def valid_env(monkeypatch):
    monkeypatch.setenv("PORT", "3001")
    monkeypatch.setenv("PRODUCTS_BROKER_SERVERS", "redis://broker-a:6379/0,redis://broker-b:6379/0")
    return monkeypatch


class TestLoadEnvs:
    def test_reads_port_and_servers(self, valid_env):
        envs = load_envs()
        assert envs.port == 3001
        assert envs.broker_servers == [
            "redis://broker-a:6379/0",
            "redis://broker-b:6379/0",
        ]

    def test_broker_url_is_failover_list(self, valid_env):
        envs = load_envs()
        assert envs.broker_url == "redis://broker-a:6379/0;redis://broker-b:6379/0"

    def test_blank_entries_are_dropped(self, valid_env):
        valid_env.setenv("PRODUCTS_BROKER_SERVERS", "redis://a:6379/0, ,")
        assert load_envs().broker_servers == ["redis://a:6379/0"]


class TestFailFast:
    def test_missing_port_raises(self, valid_env):
        valid_env.delenv("PORT")
        with pytest.raises(ImproperlyConfigured, match="PORT"):
            load_envs()

    def test_non_numeric_port_raises(self, valid_env):
        valid_env.setenv("PORT", "http")
        with pytest.raises(ImproperlyConfigured):
            load_envs()

    def test_out_of_range_port_raises(self, valid_env):
        valid_env.setenv("PORT", "70000")
        with pytest.raises(ImproperlyConfigured):
            load_envs()

    def test_missing_servers_raises(self, valid_env):
        valid_env.delenv("PRODUCTS_BROKER_SERVERS")
        with pytest.raises(ImproperlyConfigured, match="PRODUCTS_BROKER_SERVERS"):
            load_envs()

    def test_empty_servers_raises(self, valid_env):
        valid_env.setenv("PRODUCTS_BROKER_SERVERS", " , ")
        with pytest.raises(ImproperlyConfigured):
            load_envs()


class TestServiceEnvsFrozen:
    def test_is_immutable(self):
        envs = ServiceEnvs(port=3001, broker_servers=["memory://"])
        with pytest.raises(ValidationError):
            envs.port = 4000

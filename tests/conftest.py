"""Shared fixtures for landing-zone tests."""
import copy
from datetime import datetime, timezone
from pathlib import Path

import pytest

from landingzone.config.parser import ConfigParser
from landingzone.naming.context import OrganizationContext

SAMPLE_CONFIG = Path(__file__).resolve().parent.parent / "samples" / "landingzone.yaml"

BASE_CONFIG = {
    "organization_name": "vks",
    "pattern_type": "s1",
    "region": "westeurope",
    "region_map": {"westeurope": "weu"},
    "naming": {
        "resource_group": "rg-{region}-{org}-{pattern}-{name}",
        "vnet": "vnet-{region}-{org}-{pattern}-{name}",
        "subnet": "snet-{name}",
        "nsp": "nsp-{region}-{org}-{pattern}-{name}",
        "law": "law-{region}-{org}-{pattern}-{name}",
        "storage": "st{org}{region}{pattern}{name}",
    },
}

RULES = {
    "allow-ssh": {
        "priority": 100,
        "protocol": "Tcp",
        "direction": "Inbound",
        "destination_ports": 22,
    },
    "allow-http": {
        "priority": 110,
        "protocol": "Tcp",
        "direction": "Inbound",
        "source": "Internet",
        "destination_ports": 80,
    },
}


def fixed_clock():
    return datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def nsg_rules():
    return copy.deepcopy(RULES)


@pytest.fixture
def sample_config_path():
    return SAMPLE_CONFIG


@pytest.fixture
def make_config():
    """Build a validated configuration from the base document plus overrides."""
    def _make(**overrides):
        data = copy.deepcopy(BASE_CONFIG)
        data.update(copy.deepcopy(overrides))
        return ConfigParser.parse(data)
    return _make


@pytest.fixture
def make_context():
    """Build an organization context with a fixed deployment timestamp."""
    def _make(config):
        return OrganizationContext.from_configuration(config, clock=fixed_clock)
    return _make


@pytest.fixture
def network_config(make_config):
    """One network RG, one VNet, one subnet with two rules, one perimeter."""
    return make_config(
        resource_groups=[{"name": "landingzone", "type": "network"}],
        vnets=[{
            "name": "main",
            "cidr": "10.0.0.0/16",
            "subnets": [{
                "name": "compute",
                "cidr": "10.0.1.0/24",
                "nsg_rules": ["allow-ssh", "allow-http"],
            }],
        }],
        custom_nsg_rules=RULES,
        nsp="main",
        custom_nsp_rules={"allow-corp": {"source": "203.0.113.0/24"}},
    )

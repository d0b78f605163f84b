"""Tests for name rendering and the organization context."""
import pytest
from landingzone.errors import ConfigurationError
from landingzone.naming.context import OrganizationContext
from landingzone.naming.engine import NamingEngine, render_name


@pytest.fixture
def context():
    return OrganizationContext(org="vks", pattern="s1", region="westeurope", region_short="weu")


def test_render_resource_group_name(context):
    """Test the landing-zone resource group scenario."""
    name = render_name("rg-{region}-{org}-{pattern}-{name}", "landingzone", context)
    assert name == "rg-weu-vks-s1-landingzone-01"


def test_render_custom_suffix(context):
    assert render_name("vnet-{name}", "main", context, suffix="02") == "vnet-main-02"
    assert render_name("vnet-{name}", "main", context, suffix="-03") == "vnet-main-03"


def test_render_empty_suffix(context):
    assert render_name("vnet-{name}", "main", context, suffix="") == "vnet-main"


def test_unknown_placeholder_left_literal(context):
    """Test that typos stay visible instead of failing."""
    name = render_name("rg-{regoin}-{org}-{name}", "core", context)
    assert name == "rg-{regoin}-vks-core-01"


def test_placeholder_repeated(context):
    assert render_name("{org}-{name}-{org}", "x", context) == "vks-x-vks-01"


def test_name_value_not_substituted_again(context):
    """Test that placeholder-like text inside the logical name is kept."""
    assert render_name("rg-{name}-{org}", "{org}", context) == "rg-{org}-vks-01"


def test_empty_template_rejected(context):
    with pytest.raises(ValueError):
        render_name("", "core", context)


def test_engine_derived_names(context, make_config):
    engine = NamingEngine(context, make_config().naming)

    subnet = engine.subnet("compute")
    vnet = engine.vnet("main")
    assert subnet == "snet-compute-01"
    assert engine.nsg(subnet) == "nsg-snet-compute-01"
    assert engine.flow_log(vnet) == "flow-vnet-weu-vks-s1-main-01"
    assert engine.perimeter("main") == "nsp-weu-vks-s1-main-01"
    assert engine.workspace("main") == "law-weu-vks-s1-main-01"


def test_storage_account_name_without_hyphens(context, make_config):
    engine = NamingEngine(context, make_config().naming)
    assert engine.storage_account("workload") == "stvksweus1workload01"


def test_context_from_configuration(make_config, make_context):
    config = make_config(tags={"owner": "platform", "env": "dev"})
    context = make_context(config)

    assert context.region_short == "weu"
    assert context.deployed_at == "2024-05-01T12:30:00Z"
    assert context.tag_args == ["owner=platform", "env=dev", "deployed_at=2024-05-01T12:30:00Z"]


def test_context_is_immutable(context):
    with pytest.raises(AttributeError):
        context.org = "other"


def test_context_unmapped_region(make_config):
    config = make_config()
    config.region = "eastus"

    with pytest.raises(ConfigurationError) as excinfo:
        OrganizationContext.from_configuration(config)
    assert "region_map.eastus" in str(excinfo.value)

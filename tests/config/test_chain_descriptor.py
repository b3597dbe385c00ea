"""Tests for ChainDescriptor construction"""

import dataclasses
import pytest

from optics_deploy.config.builders import build_chain_descriptor, chain_descriptor_from_env
from optics_deploy.config.environment import EnvironmentManager
from optics_deploy.config.errors import InvalidConfigFile, InvalidDomain, MissingRequiredField

from tests.constants import CELO_RPC, TEST_DEPLOYER_KEY


def test_build_celo_descriptor():
    """Domain is derived from the chain name when not supplied"""
    chain = build_chain_descriptor("celo", CELO_RPC, TEST_DEPLOYER_KEY)

    assert chain.name == "celo"
    assert chain.domain == 0x63656C6F
    assert chain.rpc_endpoint == CELO_RPC
    assert chain.deployer_key == TEST_DEPLOYER_KEY
    assert chain.has_deployer


@pytest.mark.parametrize("rpc", [None, "", "   "])
def test_missing_rpc_endpoint(rpc):
    """Construction fails immediately without an RPC endpoint"""
    with pytest.raises(MissingRequiredField) as exc_info:
        build_chain_descriptor("celo", rpc, TEST_DEPLOYER_KEY)
    assert exc_info.value.field == "rpc_endpoint"


def test_missing_name():
    with pytest.raises(MissingRequiredField) as exc_info:
        build_chain_descriptor("", CELO_RPC)
    assert exc_info.value.field == "name"


@pytest.mark.parametrize("name", [42, ["celo"]])
def test_non_string_name_rejected(name):
    with pytest.raises(InvalidConfigFile) as exc_info:
        build_chain_descriptor(name, CELO_RPC)
    assert exc_info.value.field == "name"


def test_non_string_name_rejected_before_env_lookup():
    with pytest.raises(InvalidConfigFile):
        chain_descriptor_from_env(42, EnvironmentManager({"CELO_RPC": CELO_RPC}))


def test_deployer_key_optional():
    """Read-only contexts have no deployer key"""
    chain = build_chain_descriptor("celo", CELO_RPC)
    assert chain.deployer_key is None
    assert not chain.has_deployer


def test_deployer_key_hidden():
    """The key never shows in repr or serialized output"""
    chain = build_chain_descriptor("celo", CELO_RPC, TEST_DEPLOYER_KEY)

    assert TEST_DEPLOYER_KEY not in repr(chain)
    assert "deployer_key" not in chain.to_dict()
    assert chain == build_chain_descriptor("celo", CELO_RPC)


def test_descriptor_is_immutable():
    chain = build_chain_descriptor("celo", CELO_RPC)
    with pytest.raises(dataclasses.FrozenInstanceError):
        chain.rpc_endpoint = "https://example.org"


@pytest.mark.parametrize("domain,expected", [
    (1000, 1000),
    ("0x63656c6f", 0x63656C6F),
    ("1667591279", 1667591279),
])
def test_explicit_domain(domain, expected):
    chain = build_chain_descriptor("celo", CELO_RPC, domain=domain)
    assert chain.domain == expected


def test_domain_tag_for_long_names():
    """Chains with long names need a registered or explicit tag"""
    assert build_chain_descriptor("ethereum", "http://localhost:8545").domain == 0x657468
    assert build_chain_descriptor("arbitrum", "http://localhost:8545", domain_tag="arb").domain == 0x617262

    with pytest.raises(InvalidDomain):
        build_chain_descriptor("arbitrum", "http://localhost:8545")


@pytest.mark.parametrize("domain", [-5, 2**32, "not-a-number"])
def test_invalid_explicit_domain(domain):
    with pytest.raises(InvalidDomain):
        build_chain_descriptor("celo", CELO_RPC, domain=domain)


def test_descriptor_from_env(provider):
    """RPC and key are read from chain-prefixed keys"""
    chain = chain_descriptor_from_env("celo", provider)

    assert chain.rpc_endpoint == CELO_RPC
    assert chain.deployer_key == TEST_DEPLOYER_KEY
    assert chain.domain == 0x63656C6F


def test_descriptor_from_env_domain_override():
    provider = EnvironmentManager({"CELO_RPC": CELO_RPC, "CELO_DOMAIN": "1234"})
    assert chain_descriptor_from_env("celo", provider).domain == 1234


def test_descriptor_from_env_missing_rpc(empty_provider):
    with pytest.raises(MissingRequiredField) as exc_info:
        chain_descriptor_from_env("celo", empty_provider)
    assert exc_info.value.field == "rpc_endpoint"

"""Shared test fixtures"""

import copy
import pytest
from typing import Any, Dict

from optics_deploy.config.chain_configurations import CELO_DEPLOY
from optics_deploy.config.environment import EnvironmentManager

from tests.constants import CELO_RPC, TEST_DEPLOYER_KEY


@pytest.fixture
def celo_core_fields() -> Dict[str, Any]:
    """Core section of the celo mainnet deploy"""
    return copy.deepcopy(CELO_DEPLOY["core"])


@pytest.fixture
def celo_raw(celo_core_fields) -> Dict[str, Any]:
    """Complete raw celo deploy configuration, RPC included"""
    return {
        "chain": {"name": "celo", "rpc_endpoint": CELO_RPC},
        "core": celo_core_fields,
        "bridge": {},
    }


@pytest.fixture
def provider() -> EnvironmentManager:
    """Provider holding the celo RPC and deployer key"""
    return EnvironmentManager({
        "CELO_RPC": CELO_RPC,
        "CELO_DEPLOYER_KEY": TEST_DEPLOYER_KEY,
    })


@pytest.fixture
def empty_provider() -> EnvironmentManager:
    return EnvironmentManager({})

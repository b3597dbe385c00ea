"""
Mainnet deploy parameters for the chains the bridge already runs on.

RPC endpoints and deployer keys are not stored here; they come from the
provider as <CHAIN>_RPC and <CHAIN>_DEPLOYER_KEY.
"""

from typing import Any, Dict, List, Optional

from .builders import build_deploy_config
from .chain_config_template import DeployConfig
from .environment import EnvironmentManager
from .validators import SecurityPolicy

DAY = 60 * 60 * 24
HOUR = 60 * 60

CELO_DEPLOY = {
    "chain": {
        "name": "celo",
        "domain": 0x63656C6F,  # b'celo' interpreted as an int
    },
    "core": {
        "environment": "prod",
        "updater": "0xDB2091535eb0Ee447Ce170DDC25204FEA822dd81",
        "recovery_timelock": DAY,
        "recovery_manager": "0x3D9330014952Bf0A3863FEB7a657bfFA5C9D40B9",
        "optimistic_seconds": 3 * HOUR,
        "watchers": ["0xeE42B7757798cf495CDaA8eDb0CC237F07c60C81"],
        "process_gas": 850_000,
        "reserve_gas": 15_000,
    },
    "bridge": {},
}

MAINNET_DEPLOYS: Dict[str, Dict[str, Any]] = {
    "celo": CELO_DEPLOY,
}


def get_mainnet_chains() -> List[str]:
    """Get names of chains with stored deploy parameters"""
    return list(MAINNET_DEPLOYS.keys())


def load_chain_deploy_config(
    chain_name: str,
    provider: EnvironmentManager,
    policy: Optional[SecurityPolicy] = None,
) -> DeployConfig:
    """
    Build the deploy configuration of a known chain

    Raises:
        ValueError: chain has no stored parameters
        ConfigError: provider lacks the RPC endpoint, or parameters are invalid
    """
    if chain_name not in MAINNET_DEPLOYS:
        raise ValueError(f"Chain {chain_name} not supported")
    return build_deploy_config(MAINNET_DEPLOYS[chain_name], provider=provider, policy=policy)

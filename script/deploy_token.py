from moccasin.boa_tools import VyperContract
from moccasin.config import get_active_network

from contracts import b8dex
from script.token_config import CONTRACT_ARGUMENTS, TOKEN_CONFIG


def deploy_token() -> VyperContract:
    """
    Deploys the B8DEX token with the configured constructor arguments.

    Returns:
        VyperContract: The deployed token contract instance.
    """
    token: VyperContract = b8dex.deploy(*CONTRACT_ARGUMENTS)
    active_network = get_active_network()
    if (
        active_network.has_explorer()
        and active_network.is_local_or_forked_network() is False
    ):
        result = active_network.moccasin_verify(token)
        result.wait_for_verification()

    print(f"{TOKEN_CONFIG.contract_name} deployed at: {token.address}")
    network = TOKEN_CONFIG.network_named(active_network.name)
    if network is not None:
        print(f"{network.explorer_name}: {network.contract_url(token.address)}")
    return token


def moccasin_main() -> VyperContract:
    """
    Main deployment function for Moccasin framework.

    Returns:
        VyperContract: The deployed token contract instance.
    """
    return deploy_token()

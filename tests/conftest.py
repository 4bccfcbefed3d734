import boa
import pytest
from eth_utils import to_wei
from moccasin._sys_path_and_config_setup import (
    _setup_network_and_account_from_config_and_cli,
)
from moccasin.config import get_or_initialize_config

from script.deploy_token import deploy_token
from script.ledger import SetRunning, TokenModel, Transfer
from script.scenario import ScenarioRunner
from script.token_config import TOKEN_CONFIG

ONE = to_wei(1, "ether")
FOUR = to_wei(4, "ether")


def pytest_configure(config):
    # same setup `mox test` performs before running pytest
    get_or_initialize_config()
    _setup_network_and_account_from_config_and_cli()


@pytest.fixture(scope="session")
def token():
    return deploy_token()


@pytest.fixture(scope="session")
def owner(token):
    return token.owner()


@pytest.fixture(scope="session")
def holder():
    return boa.env.generate_address("holder")


@pytest.fixture(scope="session")
def external_user():
    return boa.env.generate_address("external_user")


@pytest.fixture(scope="function")
def model(owner):
    return TokenModel(owner, TOKEN_CONFIG.total_supply)


@pytest.fixture(scope="function")
def runner(token, model, holder, external_user):
    return ScenarioRunner(token, model, accounts=(holder, external_user))


@pytest.fixture(scope="function")
def funded(runner, owner, holder, external_user):
    """Holder has 1 token, external user has 4, as after the first two transfers"""
    runner.run_ok(Transfer(owner, holder, ONE))
    runner.run_ok(Transfer(owner, external_user, FOUR))
    return runner


@pytest.fixture(scope="function")
def stopped(funded, owner):
    funded.run_ok(SetRunning(owner, False))
    return funded

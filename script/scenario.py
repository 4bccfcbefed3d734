import boa
from moccasin.boa_tools import VyperContract
from moccasin.logging import logger

from script.ledger import (
    Burn,
    Mint,
    MultiTransfer,
    NotRunning,
    SetRunning,
    TokenError,
    TokenModel,
    Transfer,
    Unauthorized,
)
from script.token_config import TokenConfig


class ScenarioRunner:
    """
    @notice Drives operations against the deployed token in lockstep with a TokenModel
    @dev Every operation is predicted by the model first. Expected successes are
         sent and then applied to the model; expected rejections must revert with
         the exact reason and leave balances, supply and the running flag untouched.
    """

    def __init__(self, token: VyperContract, model: TokenModel, accounts=()):
        self.token = token
        self.model = model
        self._tracked = [model.owner, *accounts]

    def track(self, account):
        if account not in self._tracked:
            self._tracked.append(account)

    def tracked_accounts(self) -> list:
        seen = list(self._tracked)
        for account in self.model.ledger.accounts():
            if account not in seen:
                seen.append(account)
        return seen

    def _send(self, op):
        with boa.env.prank(op.caller):
            if isinstance(op, Transfer):
                self.token.transfer(op.to, op.amount)
            elif isinstance(op, MultiTransfer):
                receivers = [to for to, _ in op.recipients]
                amounts = [amount for _, amount in op.recipients]
                self.token.multiTransfer(receivers, amounts)
            elif isinstance(op, Mint):
                self.token.mint(op.amount)
            elif isinstance(op, Burn):
                if op.owner_only():
                    self.token.burnFrom(op.account, op.amount)
                else:
                    self.token.burn(op.amount)
            elif isinstance(op, SetRunning):
                self.token.startStop()
            else:
                raise TypeError(f"cannot send {op!r}")

    def _observe(self) -> tuple:
        balances = {
            account: self.token.balanceOf(account)
            for account in self.tracked_accounts()
        }
        return balances, self.token.totalSupply(), self.token.running()

    def run(self, op) -> TokenError | None:
        """
        @notice Issue one operation and assert the contract agrees with the model
        @return The rejection the contract reverted with, or None on success
        """
        expected = self.model.check(op)
        if expected is None:
            self._send(op)
            self.model.apply(op)
            logger.debug("sent %s", op)
            return None

        before = self._observe()
        with boa.reverts(expected.reason):
            self._send(op)
        after = self._observe()
        assert (
            after == before
        ), f"{op!r} reverted but changed state: {before} -> {after}"
        logger.debug("rejected %s: %s", op, expected.reason)
        return expected

    def run_ok(self, op):
        """Issue an operation that must succeed; not sent if the model refuses it."""
        expected = self.model.check(op)
        assert (
            expected is None
        ), f"{op!r} should succeed but the model predicts {expected.reason!r}"
        self.run(op)

    def run_rejected(self, op, error_type=TokenError) -> TokenError:
        """Issue an operation that must revert with an `error_type` reason."""
        expected = self.model.check(op)
        assert isinstance(
            expected, error_type
        ), f"{op!r} should fail with {error_type.__name__}, model says {expected!r}"
        return self.run(op)

    def run_all(self, ops) -> list:
        return [self.run(op) for op in ops]

    def checkpoint(self):
        ledger = self.model.ledger
        for account in self.tracked_accounts():
            actual = self.token.balanceOf(account)
            expected = ledger.balance_of(account)
            assert (
                actual == expected
            ), f"balance of {account}: contract {actual}, expected {expected}"
        assert sum(ledger.snapshot().values()) == ledger.total_supply
        assert self.token.totalSupply() == ledger.total_supply
        assert self.token.running() == self.model.running

    def check_identity(self, config: TokenConfig):
        assert self.token.name() == config.contract_name
        assert self.token.symbol() == config.symbol
        assert self.token.decimals() == config.decimals
        assert self.token.totalSupply() == config.total_supply


def run_reference_scenario(
    runner: ScenarioRunner, config: TokenConfig, holder, external
):
    """
    @notice The fixed end-to-end sequence: transfers, a multi-transfer, a
            stopped window where every transfer is refused, then mint and burn
    @param runner Runner built on a freshly deployed token
    @param config Parameters the token was deployed with
    @param holder First non-owner account
    @param external Second non-owner account
    """
    owner = runner.model.owner
    ledger = runner.model.ledger
    one = config.to_base_units(1)
    four = config.to_base_units(4)
    total = config.total_supply

    runner.track(holder)
    runner.track(external)

    runner.check_identity(config)
    assert ledger.balance_of(owner) == total
    assert ledger.balance_of(holder) == 0
    assert ledger.balance_of(external) == 0
    runner.checkpoint()

    runner.run_ok(Transfer(owner, holder, one))
    runner.run_ok(Transfer(owner, external, four))
    assert ledger.balance_of(owner) == total - 5 * one
    assert ledger.balance_of(holder) == one
    assert ledger.balance_of(external) == four
    runner.checkpoint()

    runner.run_ok(Transfer(external, holder, one))
    assert ledger.balance_of(holder) == 2 * one
    assert ledger.balance_of(external) == 3 * one
    runner.checkpoint()

    batch = ((holder, four), (external, four))
    runner.run_ok(MultiTransfer(owner, batch))
    assert ledger.balance_of(owner) == total - 13 * one
    assert ledger.balance_of(holder) == 6 * one
    assert ledger.balance_of(external) == 7 * one
    runner.checkpoint()

    # stop: refused for a holder, accepted for the owner
    runner.run_rejected(SetRunning(holder, False), Unauthorized)
    runner.run_ok(SetRunning(owner, False))
    runner.checkpoint()

    for caller, to in ((owner, holder), (holder, external), (external, holder)):
        runner.run_rejected(Transfer(caller, to, one), NotRunning)
    for caller in (owner, holder, external):
        runner.run_rejected(MultiTransfer(caller, batch), NotRunning)
    runner.checkpoint()

    runner.run_rejected(SetRunning(holder, True), Unauthorized)
    runner.run_ok(SetRunning(owner, True))
    runner.checkpoint()

    owner_before = ledger.balance_of(owner)
    runner.run_rejected(Mint(holder, one), Unauthorized)
    runner.run_ok(Mint(owner, one))
    assert ledger.balance_of(owner) == owner_before + one
    assert ledger.balance_of(holder) == 6 * one
    runner.checkpoint()

    holder_before = ledger.balance_of(holder)
    owner_before = ledger.balance_of(owner)
    runner.run_ok(Burn(holder, holder, one))
    runner.run_ok(Burn(owner, owner, one))
    assert ledger.balance_of(holder) == holder_before - one
    assert ledger.balance_of(owner) == owner_before - one
    assert ledger.total_supply == total - one
    runner.checkpoint()

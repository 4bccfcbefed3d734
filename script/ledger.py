"""
Expected-state model of the B8DEX token.

`Ledger` is the balance oracle: plain integer bookkeeping that mirrors what
a correct token must report. `TokenModel` wraps it with the owner guard and
the running switch so that every operation sent to the contract can be
predicted (success, or the exact rejection) before it is sent.
"""

import copy
from dataclasses import dataclass
from enum import Enum

from eth_utils import to_checksum_address
from moccasin.logging import logger

MAX_UINT256 = 2**256 - 1
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

REASON_UNAUTHORIZED = "Ownable: caller is not the owner"
REASON_NOT_RUNNING = "Contract not running"
REASON_TRANSFER_EXCEEDS_BALANCE = "ERC20: transfer amount exceeds balance"
REASON_BURN_EXCEEDS_BALANCE = "ERC20: burn amount exceeds balance"
REASON_ZERO_RECEIVER = "ERC20: transfer to the zero address"


class InvariantError(Exception):
    """The model itself was driven outside its bounds."""


class TokenError(Exception):
    """A rejection the contract under test is expected to revert with."""

    reason: str = ""

    def __init__(self, reason: str | None = None):
        if reason is not None:
            self.reason = reason
        super().__init__(self.reason)


class Unauthorized(TokenError):
    reason = REASON_UNAUTHORIZED


class NotRunning(TokenError):
    reason = REASON_NOT_RUNNING


class InsufficientBalance(TokenError):
    reason = REASON_TRANSFER_EXCEEDS_BALANCE


class InvalidReceiver(TokenError):
    reason = REASON_ZERO_RECEIVER


def _key(account) -> str:
    return to_checksum_address(str(account))


class Ledger:
    def __init__(self):
        self._balances: dict[str, int] = {}
        self.total_supply = 0

    def balance_of(self, account) -> int:
        return self._balances.get(_key(account), 0)

    def accounts(self) -> list[str]:
        return list(self._balances)

    def snapshot(self) -> dict[str, int]:
        return dict(self._balances)

    def credit(self, account, amount: int):
        if amount < 0:
            raise InvariantError(f"cannot credit a negative amount ({amount})")
        key = _key(account)
        balance = self._balances.get(key, 0) + amount
        if balance > MAX_UINT256:
            raise InvariantError(f"balance of {key} would overflow uint256")
        self._balances[key] = balance

    def debit(self, account, amount: int, reason: str | None = None):
        """
        @notice Remove `amount` from `account`
        @dev Raises InsufficientBalance and leaves the ledger untouched when
             the balance does not cover the amount.
        """
        if amount < 0:
            raise InvariantError(f"cannot debit a negative amount ({amount})")
        key = _key(account)
        balance = self._balances.get(key, 0)
        if amount > balance:
            raise InsufficientBalance(reason)
        self._balances[key] = balance - amount

    def transfer(self, sender, receiver, amount: int):
        if _key(receiver) == ZERO_ADDRESS:
            raise InvalidReceiver()
        # debit first: a failed debit must not leave a credit behind
        self.debit(sender, amount)
        self.credit(receiver, amount)

    def multi_transfer(self, sender, recipients):
        """
        @notice Apply `transfer(sender, to, amount)` for each recipient in order
        @dev All-or-nothing: if any leg fails the balances are restored.
        """
        saved = self.snapshot()
        try:
            for receiver, amount in recipients:
                self.transfer(sender, receiver, amount)
        except Exception:
            self._balances = saved
            raise

    def mint(self, account, amount: int):
        if self.total_supply + amount > MAX_UINT256:
            raise InvariantError("total supply would overflow uint256")
        self.credit(account, amount)
        self.total_supply += amount

    def burn(self, account, amount: int):
        self.debit(account, amount, reason=REASON_BURN_EXCEEDS_BALANCE)
        self.total_supply -= amount


class RunState(Enum):
    RUNNING = "running"
    STOPPED = "stopped"

    def toggled(self) -> "RunState":
        return RunState.STOPPED if self is RunState.RUNNING else RunState.RUNNING


@dataclass(frozen=True)
class Transfer:
    caller: str
    to: str
    amount: int

    def owner_only(self) -> bool:
        return False

    def running_gated(self) -> bool:
        return True


@dataclass(frozen=True)
class MultiTransfer:
    caller: str
    recipients: tuple  # ((to, amount), ...)

    def owner_only(self) -> bool:
        return False

    def running_gated(self) -> bool:
        return True


@dataclass(frozen=True)
class Mint:
    """Mint `amount` to the caller."""

    caller: str
    amount: int

    def owner_only(self) -> bool:
        return True

    def running_gated(self) -> bool:
        return False


@dataclass(frozen=True)
class Burn:
    """Burn from `account`; burning someone else's balance is owner-only."""

    caller: str
    account: str
    amount: int

    def owner_only(self) -> bool:
        return _key(self.account) != _key(self.caller)

    def running_gated(self) -> bool:
        return False


@dataclass(frozen=True)
class SetRunning:
    """Flip the running switch to `running` via startStop."""

    caller: str
    running: bool

    def owner_only(self) -> bool:
        return True

    def running_gated(self) -> bool:
        return False


class TokenModel:
    """
    @notice Ledger plus access control and the running state machine
    @dev Guards run in contract order: owner check, running check, then the
         balance arithmetic. Mint and burn are not gated by the running state.
    """

    def __init__(self, owner, genesis_supply: int):
        self.owner = _key(owner)
        self.state = RunState.RUNNING
        self.ledger = Ledger()
        self.ledger.mint(self.owner, genesis_supply)

    @property
    def running(self) -> bool:
        return self.state is RunState.RUNNING

    def _require_owner(self, caller):
        if _key(caller) != self.owner:
            raise Unauthorized()

    def _require_running(self):
        if self.state is not RunState.RUNNING:
            raise NotRunning()

    def check(self, op) -> TokenError | None:
        """Return the rejection `op` should meet, or None, without mutating."""
        try:
            copy.deepcopy(self).apply(op)
        except TokenError as exc:
            return exc
        return None

    def apply(self, op):
        if op.owner_only():
            self._require_owner(op.caller)
        if op.running_gated():
            self._require_running()

        if isinstance(op, Transfer):
            self.ledger.transfer(op.caller, op.to, op.amount)
        elif isinstance(op, MultiTransfer):
            self.ledger.multi_transfer(op.caller, op.recipients)
        elif isinstance(op, Mint):
            self.ledger.mint(op.caller, op.amount)
        elif isinstance(op, Burn):
            self.ledger.burn(op.account, op.amount)
        elif isinstance(op, SetRunning):
            if op.running == self.running:
                raise InvariantError(
                    f"startStop cannot set running={op.running}, "
                    f"already {self.state.value}"
                )
            self.state = self.state.toggled()
        else:
            raise InvariantError(f"unknown operation {op!r}")
        logger.debug("model applied %s", op)

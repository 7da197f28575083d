"""
Rental Orchestrator
-------------------

This module is what handles all the user actions in the client.

Responsibilities
================

- resolving the starting mode (sign in, registration, or home)
- checking the preconditions of every action before anything is sent
- sequencing the change calls of an action and reading back the bike it touched
- reporting every failure to the user

The ledgers are the only source of truth, and the client can only observe
them. A call that fails may still have had an effect, so every bike action
ends by reading the bike again, whatever the outcome.

Paying to use a bike is a single transfer to the fleet ledger carrying the
bike index. The token ledger then asks the fleet ledger to react to it, and
refunds the transfer if it refuses. The client only ever learns whether the
transfer went through, the bike read afterwards is what tells it whether the
bike is now in use.
"""
from asyncio import gather
from dataclasses import dataclass, replace
from typing import Optional, Tuple, Awaitable

from bikeshare import logger
from bikeshare.events import EventHub, EventList
from bikeshare.gateway import FleetGateway, TokenGateway, GatewayError
from bikeshare.models import Account, ActionResult, BikeSnapshot, FleetSnapshot, RentalFeeConfig, \
    TokenAccount, TransactionKind, WorkflowMode
from bikeshare.service.manager.fleet_synchronizer import FleetSynchronizer
from bikeshare.service.manager.workflow import TransactionWorkflowController, RentalError
from bikeshare.service.rebuildable import Rebuildable
from bikeshare.service.session import Session

LOCKING_ACTIONS = frozenset({TransactionKind.INSPECT, TransactionKind.RETURN, TransactionKind.REGISTER})
"""
The actions that hold the transaction mode while their change call runs.
Paying to use a bike does not, so it can overlap another workflow.
"""


class InsufficientFunds(RentalError):

    def __init__(self, balance: int, required: int):
        super().__init__(f"{required}ft is required to use the bike, the balance is {balance}ft")
        self.balance = balance
        self.required = required


class NotRegistered(RentalError):

    def __init__(self, account_id: str):
        super().__init__(f"{account_id} must register with the token ledger first")
        self.account_id = account_id


class NotSignedIn(RentalError):

    def __init__(self):
        super().__init__("You must sign in first")


class RentalEvent(EventList):

    def mode_changed(self, mode: WorkflowMode):
        """The rendering mode changed."""

    def fleet_loaded(self, fleet: FleetSnapshot):
        """The whole fleet was read."""

    def bike_updated(self, bike: BikeSnapshot):
        """A single bike was read again."""

    def balance_updated(self, account: TokenAccount):
        """The displayed balance changed."""

    def error_reported(self, kind: TransactionKind, error: Exception):
        """An action failed, and the user should be told."""


@dataclass(frozen=True)
class ClientView:
    """The read-only projection handed to whatever renders the client."""

    mode: WorkflowMode
    account: Account
    fee: Optional[RentalFeeConfig]
    fleet: Tuple[BikeSnapshot, ...]
    balance: Optional[TokenAccount]


class RentalOrchestrator(Rebuildable):
    """
    Owns the mode, the fleet snapshot and the displayed balance, and runs
    every user action. Actions resolve to an :class:`ActionResult` and never
    raise; failures are also emitted on the hub.
    """

    def __init__(self, session: Session, fleet_gateway: FleetGateway, token_gateway: TokenGateway,
                 synchronizer: FleetSynchronizer):
        self._session = session
        self._fleet_gateway = fleet_gateway
        self._token_gateway = token_gateway
        self._synchronizer = synchronizer

        self.hub = EventHub(RentalEvent)
        self.workflow = TransactionWorkflowController(on_change=self.hub.mode_changed)

        self.account = Account(session.account_id)
        """The session facts, as last resolved."""

        self.fee: Optional[RentalFeeConfig] = None
        """Read once at startup and kept for the lifetime of the client."""

        self.fleet = FleetSnapshot()
        self.balance: Optional[TokenAccount] = None

    @property
    def mode(self) -> WorkflowMode:
        return self.workflow.mode

    def view(self) -> ClientView:
        return ClientView(self.mode, self.account, self.fee, tuple(self.fleet), self.balance)

    async def _rebuild(self):
        """
        Reads the fee, the session and the whole fleet, and resolves the starting mode.

        :raises GatewayError: If the ledgers cannot be read.
        """
        amount, self.account, self.fleet = await gather(
            self._fleet_gateway.amount_to_use_bike(),
            self._session.resolve(),
            self._synchronizer.read_all(),
        )
        self.fee = RentalFeeConfig(amount)
        self.workflow.set(self._resting_mode(self.account))
        self.hub.fleet_loaded(self.fleet)
        logger.info("Loaded %s bikes for %s, fee is %sft", len(self.fleet), self.account.account_id, amount)

    async def use(self, index: int, *, account: Optional[Account] = None) -> ActionResult:
        """
        Pays the fee to use a bike.

        The balance is read fresh and checked against the fee before anything
        is sent. Registration is taken from the session facts as they are.
        """
        account = account if account is not None else self.account

        try:
            self._require_signed_in(account)
            if not account.registered:
                raise NotRegistered(account.account_id)
            fee = self._require_fee()
            balance = await self._token_gateway.ft_balance_of(account.account_id)
            if balance < fee.amount:
                raise InsufficientFunds(balance, fee.amount)
        except (RentalError, GatewayError) as error:
            return self._report(TransactionKind.USE, error)

        logger.info("%s pays %sft to use bike %s", account.account_id, fee.amount, index)
        result = await self._settle(TransactionKind.USE, self._pay_to_use(index, fee))
        await self._refresh(TransactionKind.USE, index)
        return result

    async def inspect(self, index: int, *, account: Optional[Account] = None) -> ActionResult:
        """Starts inspecting an available bike."""
        return await self._bike_workflow(TransactionKind.INSPECT, index, account, self._fleet_gateway.inspect_bike)

    async def return_bike(self, index: int, *, account: Optional[Account] = None) -> ActionResult:
        """Returns a bike the account is using or inspecting."""
        return await self._bike_workflow(TransactionKind.RETURN, index, account, self._fleet_gateway.return_bike)

    async def register(self, *, account: Optional[Account] = None) -> ActionResult:
        """
        Pays the storage deposit on the token ledger, holding the transaction
        mode meanwhile. Success of the call is taken as registration, it is
        not read back, and moves the client home. A failure leaves the mode
        where it was.
        """
        account = account if account is not None else self.account

        try:
            self._require_signed_in(account)
            self.workflow.ensure_idle()
        except RentalError as error:
            return self._report(TransactionKind.REGISTER, error)

        async with self.workflow.begin(TransactionKind.REGISTER):
            result = await self._settle(TransactionKind.REGISTER, self._token_gateway.storage_deposit())
            if result:
                logger.info("%s registered", account.account_id)
                self.account = replace(account, registered=True)
                self.workflow.set(WorkflowMode.home())
        return result

    async def unregister(self, *, account: Optional[Account] = None) -> ActionResult:
        """Removes the storage registration, burning any remaining balance."""
        account = account if account is not None else self.account

        try:
            self._require_signed_in(account)
        except RentalError as error:
            return self._report(TransactionKind.UNREGISTER, error)

        result = await self._settle(TransactionKind.UNREGISTER, self._token_gateway.storage_unregister(force=True))
        if result:
            logger.info("%s unregistered", account.account_id)
            self.account = replace(account, registered=False)
        return result

    async def transfer(self, receiver_id: str, amount: Optional[int] = None, *,
                       account: Optional[Account] = None) -> ActionResult:
        """
        Gives tokens to another account, the fee by default. The ledger decides
        whether the balance suffices.
        """
        account = account if account is not None else self.account

        try:
            self._require_signed_in(account)
            amount = amount if amount is not None else self._require_fee().amount
        except RentalError as error:
            return self._report(TransactionKind.TRANSFER, error)

        logger.info("%s gives %sft to %s", account.account_id, amount, receiver_id)
        return await self._settle(TransactionKind.TRANSFER, self._token_gateway.ft_transfer(receiver_id, amount))

    async def check_balance(self, account_id: str) -> ActionResult:
        """Reads the balance of any account, and displays it exactly as returned."""
        try:
            balance = await self._token_gateway.ft_balance_of(account_id)
        except GatewayError as error:
            return self._report(None, error)

        self.balance = TokenAccount(account_id, balance)
        self.hub.balance_updated(self.balance)
        return ActionResult.success()

    async def check_my_balance(self) -> ActionResult:
        return await self.check_balance(self.account.account_id)

    async def check_fleet_balance(self) -> ActionResult:
        """Reads the balance the fleet ledger has collected."""
        return await self.check_balance(self._fleet_gateway.contract_id)

    async def sign_in(self) -> ActionResult:
        """
        Signs in and resolves the resting mode. A workflow that started while
        the session was being read keeps the transaction mode, and returns to
        the resting mode once it is done.
        """
        try:
            self.workflow.ensure_idle()
            self._session.sign_in()
            self.account = await self._session.resolve()
        except (RentalError, GatewayError) as error:
            return self._report(None, error)

        self.workflow.set(self._resting_mode(self.account))
        return ActionResult.success()

    async def sign_out(self) -> ActionResult:
        try:
            self.workflow.ensure_idle()
        except RentalError as error:
            return self._report(None, error)

        self._session.sign_out()
        self.account = Account(self._session.account_id)
        self.balance = None
        self.workflow.set(WorkflowMode.sign_in())
        return ActionResult.success()

    async def _bike_workflow(self, kind: TransactionKind, index: int, account: Optional[Account], call) -> ActionResult:
        account = account if account is not None else self.account

        try:
            self._require_signed_in(account)
            self.workflow.ensure_idle()
        except RentalError as error:
            return self._report(kind, error)

        async with self.workflow.begin(kind, index):
            result = await self._settle(kind, call(index))
            await self._refresh(kind, index)

        return result

    async def _pay_to_use(self, index: int, fee: RentalFeeConfig):
        used = await self._token_gateway.ft_transfer_call(self._fleet_gateway.contract_id, fee.amount, str(index))
        logger.debug("Fleet ledger kept %s of the %sft sent for bike %s", used, fee.amount, index)

    async def _settle(self, kind: TransactionKind, call: Awaitable) -> ActionResult:
        """Awaits a change call, reporting its failure."""
        try:
            await call
        except GatewayError as error:
            return self._report(kind, error)
        return ActionResult.success()

    async def _refresh(self, kind: TransactionKind, index: int):
        """Reads the bike again, to show whatever effect the action really had."""
        try:
            bike = await self._synchronizer.refresh(self.fleet, index)
        except (GatewayError, IndexError) as error:
            logger.warning("Could not read bike %s again: %s", index, error)
            self.hub.error_reported(kind, error)
        else:
            self.hub.bike_updated(bike)

    def _report(self, kind: Optional[TransactionKind], error: Exception) -> ActionResult:
        action = kind.value if kind is not None else "request"
        logger.warning("%s failed: %s", action, error)
        self.hub.error_reported(kind, error)
        return ActionResult.failure(error)

    def _require_fee(self) -> RentalFeeConfig:
        if self.fee is None:
            raise RentalError("The fee has not been read from the fleet ledger yet")
        return self.fee

    @staticmethod
    def _require_signed_in(account: Account):
        if not account.signed_in:
            raise NotSignedIn()

    @staticmethod
    def _resting_mode(account: Account) -> WorkflowMode:
        if not account.signed_in:
            return WorkflowMode.sign_in()
        if not account.registered:
            return WorkflowMode.registration()
        return WorkflowMode.home()

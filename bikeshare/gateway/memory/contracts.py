"""
The fleet and token contracts, as the ledgers run them.
"""
from enum import Enum
from typing import List, Optional, Dict, Tuple

from bikeshare import logger
from bikeshare.gateway.gateway import ONE_YOCTO, STORAGE_DEPOSIT
from .network import Contract, CallContext, ContractPanic

AMOUNT_TO_USE_BIKE = 30
"""The fee in tokens to use a bike."""

AMOUNT_REWARD_FOR_INSPECTIONS = 15
"""The tokens paid to an inspector when they return the inspected bike."""


class BikeState(str, Enum):
    AVAILABLE = "available"
    IN_USE = "in_use"
    INSPECTION = "inspection"


class FleetContract(Contract):
    """
    Keeps every bike in exactly one of three states. Using a bike is paid for by
    transferring the fee through the token contract, which calls
    :meth:`ft_on_transfer` with the bike index as the message.
    """

    view_methods = frozenset({"num_of_bikes", "is_available", "who_is_using", "who_is_inspecting",
                              "amount_to_use_bike"})
    change_methods = frozenset({"inspect_bike", "return_bike", "ft_on_transfer"})

    def __init__(self, num_of_bikes: int, ft_contract_id: str, *,
                 amount_to_use_bike=AMOUNT_TO_USE_BIKE, inspection_reward=AMOUNT_REWARD_FOR_INSPECTIONS):
        self.bikes: List[Tuple[BikeState, Optional[str]]] = [(BikeState.AVAILABLE, None)] * num_of_bikes
        self.ft_contract_id = ft_contract_id
        self.fee = amount_to_use_bike
        self.inspection_reward = inspection_reward

    def _bike(self, index) -> Tuple[BikeState, Optional[str]]:
        if not isinstance(index, int) or not 0 <= index < len(self.bikes):
            raise ContractPanic(f"Index out of bounds: the len is {len(self.bikes)} but the index is {index}")
        return self.bikes[index]

    def num_of_bikes(self, context: CallContext) -> int:
        return len(self.bikes)

    def is_available(self, context: CallContext, index: int) -> bool:
        return self._bike(index)[0] == BikeState.AVAILABLE

    def who_is_using(self, context: CallContext, index: int) -> Optional[str]:
        state, account = self._bike(index)
        return account if state == BikeState.IN_USE else None

    def who_is_inspecting(self, context: CallContext, index: int) -> Optional[str]:
        state, account = self._bike(index)
        return account if state == BikeState.INSPECTION else None

    def amount_to_use_bike(self, context: CallContext) -> str:
        return str(self.fee)

    def ft_on_transfer(self, context: CallContext, sender_id: str, amount: str, msg: str) -> str:
        if amount != str(self.fee):
            raise ContractPanic(f"Require {self.fee} ft to use the bike")
        try:
            index = int(msg)
        except ValueError:
            raise ContractPanic(f"Message {msg!r} is not a bike index")

        state, _ = self._bike(index)
        if state != BikeState.AVAILABLE:
            raise ContractPanic("Bike is not available")

        logger.debug("%s uses bike %s", sender_id, index)
        self.bikes[index] = (BikeState.IN_USE, sender_id)
        return "0"

    def inspect_bike(self, context: CallContext, index: int):
        state, _ = self._bike(index)
        if state != BikeState.AVAILABLE:
            raise ContractPanic("Bike is not available")
        self.bikes[index] = (BikeState.INSPECTION, context.predecessor_id)

    def return_bike(self, context: CallContext, index: int):
        state, holder = self._bike(index)
        if state == BikeState.AVAILABLE:
            raise ContractPanic("Bike is already available")
        if holder != context.predecessor_id:
            raise ContractPanic("Fail due to wrong account")

        if state == BikeState.IN_USE:
            self.bikes[index] = (BikeState.AVAILABLE, None)
            return

        # the reward is a separate step, the bike is only freed once it has been paid
        try:
            context.network.function_call(
                context.current_account_id, self.ft_contract_id, "ft_transfer",
                {"receiver_id": context.predecessor_id, "amount": str(self.inspection_reward)}, ONE_YOCTO
            )
        except ContractPanic as panic:
            logger.debug("Inspection reward for bike %s failed: %s", index, panic)
        else:
            self.bikes[index] = (BikeState.AVAILABLE, None)


class FungibleTokenContract(Contract):
    """
    A fungible token with storage registration. Accounts must be registered
    before they can hold tokens.
    """

    view_methods = frozenset({"ft_balance_of", "ft_total_supply", "storage_balance_of", "storage_balance_bounds"})
    change_methods = frozenset({"storage_deposit", "storage_unregister", "ft_transfer", "ft_transfer_call"})

    def __init__(self, owner_id: str, total_supply: int):
        self.balances: Dict[str, int] = {owner_id: total_supply}
        self.total_supply = total_supply

    def is_registered(self, account_id) -> bool:
        return account_id in self.balances

    def register(self, account_id: str, balance: int = 0):
        """Registers an account directly, minting the given balance."""
        self.balances[account_id] = self.balances.get(account_id, 0) + balance
        self.total_supply += balance

    def ft_balance_of(self, context: CallContext, account_id: str) -> str:
        return str(self.balances.get(account_id, 0))

    def ft_total_supply(self, context: CallContext) -> str:
        return str(self.total_supply)

    def storage_balance_bounds(self, context: CallContext) -> Dict:
        return {"min": str(STORAGE_DEPOSIT), "max": str(STORAGE_DEPOSIT)}

    def storage_balance_of(self, context: CallContext, account_id: str) -> Optional[Dict]:
        if not self.is_registered(account_id):
            return None
        return {"total": str(STORAGE_DEPOSIT), "available": "0"}

    def storage_deposit(self, context: CallContext, account_id: Optional[str] = None,
                        registration_only: Optional[bool] = None) -> Dict:
        account_id = account_id if account_id is not None else context.predecessor_id
        if self.is_registered(account_id):
            logger.debug("The account %s is already registered, refunding the deposit", account_id)
        elif context.attached_deposit < STORAGE_DEPOSIT:
            raise ContractPanic("The attached deposit is less than the minimum storage balance")
        else:
            self.balances[account_id] = 0
        return self.storage_balance_of(context, account_id)

    def storage_unregister(self, context: CallContext, force: Optional[bool] = None) -> bool:
        self._assert_one_yocto(context)
        account_id = context.predecessor_id
        if not self.is_registered(account_id):
            logger.debug("The account %s is not registered", account_id)
            return False

        balance = self.balances[account_id]
        if balance and not force:
            raise ContractPanic("Can't unregister the account with the positive balance without force")

        del self.balances[account_id]
        self.total_supply -= balance
        return True

    def ft_transfer(self, context: CallContext, receiver_id: str, amount: str, memo: Optional[str] = None):
        self._assert_one_yocto(context)
        self._transfer(context.predecessor_id, receiver_id, self._amount(amount))

    def ft_transfer_call(self, context: CallContext, receiver_id: str, amount: str, msg: str,
                         memo: Optional[str] = None) -> str:
        self._assert_one_yocto(context)
        sender_id = context.predecessor_id
        amount = self._amount(amount)
        self._transfer(sender_id, receiver_id, amount)

        try:
            unused = int(context.network.function_call(
                context.current_account_id, receiver_id, "ft_on_transfer",
                {"sender_id": sender_id, "amount": str(amount), "msg": msg}
            ))
        except (ContractPanic, TypeError, ValueError) as error:
            logger.debug("%s did not accept the transfer: %s", receiver_id, error)
            unused = amount

        refund = min(unused, amount, self.balances.get(receiver_id, 0))
        if refund:
            self.balances[receiver_id] -= refund
            if self.is_registered(sender_id):
                self.balances[sender_id] += refund
            else:
                self.total_supply -= refund
        return str(amount - refund)

    def _transfer(self, sender_id: str, receiver_id: str, amount: int):
        if sender_id == receiver_id:
            raise ContractPanic("Sender and receiver should be different")
        if amount <= 0:
            raise ContractPanic("The amount should be a positive number")
        if not self.is_registered(sender_id):
            raise ContractPanic(f"The account {sender_id} is not registered")
        if not self.is_registered(receiver_id):
            raise ContractPanic(f"The account {receiver_id} is not registered")
        if self.balances[sender_id] < amount:
            raise ContractPanic("The account doesn't have enough balance")

        self.balances[sender_id] -= amount
        self.balances[receiver_id] += amount

    @staticmethod
    def _amount(amount) -> int:
        try:
            return int(amount)
        except (TypeError, ValueError):
            raise ContractPanic(f"Failed to parse amount {amount!r}")

    @staticmethod
    def _assert_one_yocto(context: CallContext):
        if context.attached_deposit != ONE_YOCTO:
            raise ContractPanic("Requires attached deposit of exactly 1 yoctoNEAR")

import json
from base64 import b64encode

import pytest

from bikeshare.gateway import GatewayUnavailable, RejectedByLedger, STORAGE_DEPOSIT, ONE_YOCTO, GAS
from bikeshare.gateway.gateway import check_outcome
from bikeshare.gateway.memory import ContractPanic
from tests.conftest import FLEET_ID, TOKEN_ID, FEE, ACCOUNT_FUNDS, NUM_OF_BIKES


async def test_views(fleet_gateway):
    assert await fleet_gateway.num_of_bikes() == NUM_OF_BIKES
    assert await fleet_gateway.amount_to_use_bike() == FEE
    assert await fleet_gateway.is_available(0)
    assert await fleet_gateway.who_is_using(0) is None
    assert await fleet_gateway.who_is_inspecting(0) is None


async def test_unknown_view(network):
    with pytest.raises(ContractPanic):
        await network.view(FLEET_ID, "ft_on_transfer", {})


async def test_bad_arguments(fleet_gateway):
    """Assert that arguments the method does not take are refused by the ledger."""
    with pytest.raises(RejectedByLedger):
        await fleet_gateway._gateway.view("is_available", bike=0)


async def test_failure_outcome(network, account_id):
    outcome = await network.call(account_id, FLEET_ID, "return_bike", {"index": 0}, gas=GAS, deposit=0)
    failure = outcome["status"]["Failure"]["ActionError"]["kind"]["FunctionCallError"]["ExecutionError"]
    assert failure == "Smart contract panicked: Bike is already available"


async def test_success_outcome(network, registered_account):
    outcome = await network.call(registered_account, TOKEN_ID, "storage_unregister", {"force": True},
                                 gas=GAS, deposit=ONE_YOCTO)
    assert check_outcome(outcome) is True


def test_check_outcome_empty_value():
    assert check_outcome({"status": {"SuccessValue": ""}}) is None


def test_check_outcome_value():
    value = b64encode(json.dumps({"total": "1"}).encode()).decode()
    assert check_outcome({"status": {"SuccessValue": value}}) == {"total": "1"}


def test_check_outcome_failure():
    with pytest.raises(RejectedByLedger) as error:
        check_outcome({"status": {"Failure": {"ActionError": {"index": 0, "kind": {
            "FunctionCallError": {"ExecutionError": "Smart contract panicked: Fail due to wrong account"}
        }}}}})
    assert str(error.value) == "Smart contract panicked: Fail due to wrong account"


@pytest.mark.parametrize("outcome", [{}, {"status": "NotStarted"}, {"status": {"Started": None}}])
def test_check_outcome_unknown(outcome):
    with pytest.raises(GatewayUnavailable):
        check_outcome(outcome)


async def test_signed_out_wallet_cannot_change(wallet, fleet_gateway, fleet_contract):
    wallet.sign_out()
    with pytest.raises(GatewayUnavailable):
        await fleet_gateway.inspect_bike(0)
    assert fleet_contract.is_available(None, 0)


async def test_storage_deposit(token_gateway, token_contract, account_id):
    assert await token_gateway.storage_balance_of(account_id) is None
    await token_gateway.storage_deposit()
    assert token_contract.is_registered(account_id)
    balance = await token_gateway.storage_balance_of(account_id)
    assert balance.total == STORAGE_DEPOSIT


async def test_storage_deposit_too_small(token_gateway):
    with pytest.raises(RejectedByLedger):
        await token_gateway.storage_deposit(deposit=1)


async def test_storage_deposit_twice(token_gateway, registered_account, token_contract):
    """Assert that registering again keeps the balance."""
    await token_gateway.storage_deposit()
    assert token_contract.balances[registered_account] == ACCOUNT_FUNDS


async def test_transfer_to_unregistered(token_gateway, registered_account, other_account_id):
    with pytest.raises(RejectedByLedger) as error:
        await token_gateway.ft_transfer(other_account_id, 1)
    assert f"The account {other_account_id} is not registered" in str(error.value)


async def test_transfer_call_wrong_amount_refunds(token_gateway, token_contract, fleet_contract, registered_account):
    """Assert that the fleet refuses anything but the fee, and the tokens come back."""
    used = await token_gateway.ft_transfer_call(FLEET_ID, FEE + 1, "0")

    assert used == 0
    assert token_contract.balances[registered_account] == ACCOUNT_FUNDS
    assert fleet_contract.is_available(None, 0)


async def test_transfer_call_uses_bike(token_gateway, fleet_gateway, registered_account):
    used = await token_gateway.ft_transfer_call(FLEET_ID, FEE, "1")
    assert used == FEE
    assert await fleet_gateway.who_is_using(1) == registered_account


async def test_unregister_without_force(token_gateway, registered_account):
    with pytest.raises(RejectedByLedger):
        await token_gateway.storage_unregister(force=False)


async def test_inspect_then_return_by_other(network, fleet_gateway, wallet, account_id, other_account_id):
    await fleet_gateway.inspect_bike(0)
    assert await fleet_gateway.who_is_inspecting(0) == account_id

    outcome = await network.call(other_account_id, FLEET_ID, "return_bike", {"index": 0}, gas=GAS, deposit=0)
    with pytest.raises(RejectedByLedger) as error:
        check_outcome(outcome)
    assert "Fail due to wrong account" in str(error.value)


async def test_token_views(network, registered_account):
    assert await network.view(TOKEN_ID, "ft_total_supply", {}) == str(1_000_000 + 1_000 + ACCOUNT_FUNDS)
    bounds = await network.view(TOKEN_ID, "storage_balance_bounds", {})
    assert bounds == {"min": str(STORAGE_DEPOSIT), "max": str(STORAGE_DEPOSIT)}

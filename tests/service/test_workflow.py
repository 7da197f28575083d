import pytest

from bikeshare.models import WorkflowMode, TransactionKind
from bikeshare.service import TransactionWorkflowController, TransactionInFlightError


class ExpectedError(Exception):
    pass


async def test_begin_holds_transaction_mode():
    controller = TransactionWorkflowController(mode=WorkflowMode.home())
    async with controller.begin(TransactionKind.INSPECT, 2):
        assert controller.mode == WorkflowMode.transaction(TransactionKind.INSPECT, 2)
        assert controller.mode.in_flight
    assert controller.mode == WorkflowMode.home()


async def test_begin_returns_home_on_error():
    """Assert that the mode returns home when the workflow fails."""
    controller = TransactionWorkflowController(mode=WorkflowMode.home())
    with pytest.raises(ExpectedError):
        async with controller.begin(TransactionKind.RETURN, 0):
            raise ExpectedError()
    assert controller.mode == WorkflowMode.home()


async def test_single_flight():
    """Assert that a second workflow cannot start while one is in flight."""
    controller = TransactionWorkflowController(mode=WorkflowMode.home())
    async with controller.begin(TransactionKind.INSPECT, 0):
        with pytest.raises(TransactionInFlightError) as error:
            async with controller.begin(TransactionKind.RETURN, 1):
                pass
        assert error.value.mode == WorkflowMode.transaction(TransactionKind.INSPECT, 0)
        with pytest.raises(TransactionInFlightError):
            controller.ensure_idle()
    controller.ensure_idle()


def test_listener_notified_on_change(mocker):
    listener = mocker.Mock()
    controller = TransactionWorkflowController(on_change=listener)

    controller.set(WorkflowMode.registration())
    controller.set(WorkflowMode.registration())

    listener.assert_called_once_with(WorkflowMode.registration())


def test_mode_str():
    assert str(WorkflowMode.home()) == "home"
    assert str(WorkflowMode.transaction(TransactionKind.USE, 3)) == "transaction(use #3)"


async def test_begin_returns_to_entry_mode():
    """Assert that a workflow started from registration returns there, not home."""
    controller = TransactionWorkflowController(mode=WorkflowMode.registration())
    async with controller.begin(TransactionKind.INSPECT, 0):
        pass
    assert controller.mode == WorkflowMode.registration()


async def test_set_while_in_flight(mocker):
    """Assert that a mode set during a workflow only takes effect once it is done."""
    listener = mocker.Mock()
    controller = TransactionWorkflowController(on_change=listener, mode=WorkflowMode.registration())

    async with controller.begin(TransactionKind.REGISTER):
        controller.set(WorkflowMode.home())
        assert controller.mode == WorkflowMode.transaction(TransactionKind.REGISTER)
        with pytest.raises(TransactionInFlightError):
            controller.ensure_idle()

    assert controller.mode == WorkflowMode.home()
    assert [call.args[0] for call in listener.call_args_list] == [
        WorkflowMode.transaction(TransactionKind.REGISTER),
        WorkflowMode.home(),
    ]

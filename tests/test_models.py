import pytest

from bikeshare.models import BikeSnapshot, BikeStatus, FleetSnapshot, ActionResult, StorageBalance
from bikeshare.models.account import is_registered


@pytest.mark.parametrize("bike,status", [
    (BikeSnapshot(0, True), BikeStatus.AVAILABLE),
    (BikeSnapshot(0, False, user="alice"), BikeStatus.IN_USE),
    (BikeSnapshot(0, False, inspector="bob"), BikeStatus.INSPECTING),
    (BikeSnapshot(0, False), BikeStatus.INCONSISTENT),
    (BikeSnapshot(0, True, inspector="bob"), BikeStatus.INCONSISTENT),
    (BikeSnapshot(0, False, user="alice", inspector="bob"), BikeStatus.INCONSISTENT),
])
def test_bike_status(bike, status):
    assert bike.status == status


def test_bike_actions():
    """Assert that only the holder of a bike is offered to return it."""
    used = BikeSnapshot(1, False, user="alice")
    assert not used.can_use()
    assert used.can_return("alice")
    assert not used.can_return("bob")
    assert BikeSnapshot(2, True).can_use()
    assert BikeSnapshot(3, False, inspector="bob").can_return("bob")


def test_fleet_must_be_aligned():
    with pytest.raises(ValueError):
        FleetSnapshot([BikeSnapshot(1, True)])


def test_fleet_replace():
    fleet = FleetSnapshot([BikeSnapshot(0, True), BikeSnapshot(1, True)])
    fleet.replace(BikeSnapshot(1, False, user="alice"))

    assert fleet == [BikeSnapshot(0, True), BikeSnapshot(1, False, user="alice")]
    with pytest.raises(IndexError):
        fleet.replace(BikeSnapshot(2, True))


def test_registration():
    assert is_registered(StorageBalance(1, 0))
    assert not is_registered(None)


def test_action_result():
    error = ValueError("nope")
    assert ActionResult.success()
    assert not ActionResult.failure(error)
    assert ActionResult.failure(error).error is error

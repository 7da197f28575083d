"""
Bike
----

A bike is identified by its ordinal index on the fleet ledger. The ledger keeps it
in exactly one of three states (available, in use, inspecting), but the client can
only ask about each state with a separate view call. A :class:`BikeSnapshot` is
therefore the combination of three reads that happened at slightly different
times, and may contradict itself if a transaction committed between them.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, List, Iterator


class BikeStatus(str, Enum):
    """
    Represents the possible calculated states of a bike snapshot.
    """

    AVAILABLE = "available"
    IN_USE = "in_use"
    INSPECTING = "inspecting"
    INCONSISTENT = "inconsistent"

    @classmethod
    def get(cls, available, user, inspector):
        holders = (user is not None) + (inspector is not None)
        if available and holders == 0:
            return cls.AVAILABLE
        elif not available and holders == 1:
            return cls.IN_USE if user is not None else cls.INSPECTING
        else:
            return cls.INCONSISTENT


@dataclass(frozen=True)
class BikeSnapshot:
    """
    An advisory view of one bike, valid at the instant of the slowest of its reads.

    Nothing should be decided from a snapshot that has not just been re-read.
    """

    index: int
    available: bool
    user: Optional[str] = None
    inspector: Optional[str] = None

    @property
    def status(self) -> BikeStatus:
        return BikeStatus.get(self.available, self.user, self.inspector)

    def is_used_by(self, account_id: str) -> bool:
        return self.user is not None and self.user == account_id

    def is_inspected_by(self, account_id: str) -> bool:
        return self.inspector is not None and self.inspector == account_id

    def can_use(self) -> bool:
        """Whether the use and inspect actions should be offered."""
        return self.available

    def can_return(self, account_id: str) -> bool:
        """Whether the given account looks like it holds the bike."""
        return self.is_used_by(account_id) or self.is_inspected_by(account_id)


class FleetSnapshot:
    """
    The ordered bikes of the fleet, index aligned with the ledger.

    Entries are replaced one at a time and never removed.
    """

    def __init__(self, bikes: List[BikeSnapshot] = None):
        self._bikes: List[BikeSnapshot] = list(bikes) if bikes is not None else []
        for position, bike in enumerate(self._bikes):
            if bike.index != position:
                raise ValueError(f"Bike {bike.index} is at position {position}.")

    def __getitem__(self, index: int) -> BikeSnapshot:
        return self._bikes[index]

    def __len__(self):
        return len(self._bikes)

    def __iter__(self) -> Iterator[BikeSnapshot]:
        return iter(self._bikes)

    def __eq__(self, other):
        if isinstance(other, FleetSnapshot):
            return self._bikes == other._bikes
        if isinstance(other, list):
            return self._bikes == other
        return NotImplemented

    def __repr__(self):
        return f"FleetSnapshot({self._bikes!r})"

    def replace(self, bike: BikeSnapshot):
        """Replaces the entry at the bike's index, leaving every other entry untouched."""
        if not 0 <= bike.index < len(self._bikes):
            raise IndexError(f"No bike at index {bike.index} in a fleet of {len(self._bikes)}.")
        self._bikes[bike.index] = bike

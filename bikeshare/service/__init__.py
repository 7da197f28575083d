"""
.. autoclasstree:: bikeshare.service

The service layer for the client. Acts as the internal API.
Each interface (the command line, or any renderer) should use the
service layer to implement their logic.

It reconstructs the state of the fleet from the ledgers, and sequences
the calls that change it.
"""

from .session import Session
from .bike_status import BikeStatusReader
from .manager.fleet_synchronizer import FleetSynchronizer
from .manager.workflow import TransactionWorkflowController, TransactionInFlightError
from .manager.rental_orchestrator import RentalOrchestrator, RentalEvent, ClientView, RentalError, \
    InsufficientFunds, NotRegistered, NotSignedIn

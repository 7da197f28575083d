"""
.. autoclasstree:: bikeshare.models

The client keeps no records of its own. These models are the
values it reconstructs from the ledgers, and the workflow state
the orchestrator owns.
"""

from .account import Account, TokenAccount, StorageBalance, RentalFeeConfig
from .bike import BikeSnapshot, BikeStatus, FleetSnapshot
from .workflow import WorkflowMode, ModeName, TransactionKind, ActionResult

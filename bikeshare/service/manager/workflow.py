"""
Transaction Workflow
--------------------

Holds the rendering mode, and keeps at most one workflow in the
transaction mode at a time. A workflow flips the mode before its
change call and flips it back once the call settled and the bike it
touched has been read again.

While a workflow is in flight the mode is its own. Any other mode set
in the meantime is where the workflow returns to once it is done.
"""
from contextlib import asynccontextmanager
from typing import Callable, Optional

from bikeshare import logger
from bikeshare.models import WorkflowMode, TransactionKind


class RentalError(Exception):
    """Raised when an action is refused locally, before anything is sent to a ledger."""


class TransactionInFlightError(RentalError):
    """Raised when an action requires no other transaction to be in progress."""

    def __init__(self, mode: WorkflowMode):
        super().__init__(f"Another transaction is in progress: {mode}")
        self.mode = mode


class TransactionWorkflowController:

    def __init__(self, on_change: Optional[Callable[[WorkflowMode], None]] = None,
                 mode: WorkflowMode = WorkflowMode.sign_in()):
        self._mode = mode
        self._resume: Optional[WorkflowMode] = None
        self._on_change = on_change

    @property
    def mode(self) -> WorkflowMode:
        return self._mode

    def set(self, mode: WorkflowMode):
        """
        Moves to the given mode, notifying the listener if it changed. While
        a workflow is in flight, this only changes the mode it returns to.
        """
        if self._mode.in_flight:
            logger.debug("Mode %s will return to %s", self._mode, mode)
            self._resume = mode
            return
        self._switch(mode)

    def ensure_idle(self):
        """
        :raises TransactionInFlightError: If a workflow is in the transaction mode.
        """
        if self._mode.in_flight:
            raise TransactionInFlightError(self._mode)

    @asynccontextmanager
    async def begin(self, kind: TransactionKind, index: Optional[int] = None):
        """
        Holds the transaction mode for the duration of the block, returning
        to the mode it was entered from however the block exits.

        :raises TransactionInFlightError: If a workflow is already in the transaction mode.
        """
        self.ensure_idle()
        self._resume = self._mode
        self._switch(WorkflowMode.transaction(kind, index))
        try:
            yield
        finally:
            resume, self._resume = self._resume, None
            self._switch(resume)

    def _switch(self, mode: WorkflowMode):
        if mode == self._mode:
            return
        logger.debug("Mode %s -> %s", self._mode, mode)
        self._mode = mode
        if self._on_change is not None:
            self._on_change(mode)

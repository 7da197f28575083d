"""
Workflow
--------

The rendering mode of the client, modelled as a tagged union. Only
:class:`~bikeshare.service.manager.rental_orchestrator.RentalOrchestrator`
may change it.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ModeName(str, Enum):
    SIGN_IN = "sign_in"
    REGISTRATION = "registration"
    HOME = "home"
    TRANSACTION = "transaction"


class TransactionKind(str, Enum):
    """The user actions that change ledger state."""

    USE = "use"
    INSPECT = "inspect"
    RETURN = "return"
    REGISTER = "register"
    UNREGISTER = "unregister"
    TRANSFER = "transfer"


@dataclass(frozen=True)
class WorkflowMode:
    name: ModeName
    kind: Optional[TransactionKind] = None
    index: Optional[int] = None

    @classmethod
    def sign_in(cls) -> "WorkflowMode":
        return cls(ModeName.SIGN_IN)

    @classmethod
    def registration(cls) -> "WorkflowMode":
        return cls(ModeName.REGISTRATION)

    @classmethod
    def home(cls) -> "WorkflowMode":
        return cls(ModeName.HOME)

    @classmethod
    def transaction(cls, kind: TransactionKind, index: Optional[int] = None) -> "WorkflowMode":
        return cls(ModeName.TRANSACTION, kind, index)

    @property
    def in_flight(self) -> bool:
        return self.name == ModeName.TRANSACTION

    def __str__(self):
        if self.in_flight:
            target = f" #{self.index}" if self.index is not None else ""
            return f"{self.name.value}({self.kind.value}{target})"
        return self.name.value


@dataclass(frozen=True)
class ActionResult:
    """What an operation resolves to: success, or the error that was reported to the user."""

    ok: bool
    error: Optional[Exception] = None

    @classmethod
    def success(cls) -> "ActionResult":
        return cls(True)

    @classmethod
    def failure(cls, error: Exception) -> "ActionResult":
        return cls(False, error)

    def __bool__(self):
        return self.ok

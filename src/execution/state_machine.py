"""Execution State Machine — жизненный цикл одного исполнения ордера

START → SIGNATURE_VERIFIED → ORDER_VALIDATED → CALLS_AUDITED →
INVARIANT_INJECTED → SUBMITTED → POST_CHECKED → DONE

REJECTED достижим из любого нетерминального состояния. Переходы строго
последовательные: нет ветвления к успеху и нет retry внутри вызова.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Final, List, Optional


class ExecutionState(str, Enum):
    """Состояние исполнения."""

    START = "START"
    SIGNATURE_VERIFIED = "SIGNATURE_VERIFIED"
    ORDER_VALIDATED = "ORDER_VALIDATED"
    CALLS_AUDITED = "CALLS_AUDITED"
    INVARIANT_INJECTED = "INVARIANT_INJECTED"
    SUBMITTED = "SUBMITTED"
    POST_CHECKED = "POST_CHECKED"
    DONE = "DONE"
    REJECTED = "REJECTED"


# Единственный путь к успеху
HAPPY_PATH: Final[tuple[ExecutionState, ...]] = (
    ExecutionState.START,
    ExecutionState.SIGNATURE_VERIFIED,
    ExecutionState.ORDER_VALIDATED,
    ExecutionState.CALLS_AUDITED,
    ExecutionState.INVARIANT_INJECTED,
    ExecutionState.SUBMITTED,
    ExecutionState.POST_CHECKED,
    ExecutionState.DONE,
)

TERMINAL_STATES: Final[frozenset[ExecutionState]] = frozenset(
    {ExecutionState.DONE, ExecutionState.REJECTED}
)


class IllegalStateTransition(Exception):
    """Переход вне допустимого графа (ошибка программирования, не ордера)."""

    pass


@dataclass(frozen=True)
class ExecutionTransition:
    """Один выполненный переход."""

    previous_state: ExecutionState
    new_state: ExecutionState
    reason: str


class ExecutionStateMachine:
    """State machine одного вызова execute_order."""

    def __init__(self):
        self._state = ExecutionState.START
        self._history: List[ExecutionTransition] = []
        self._rejection_tag: Optional[str] = None

    @property
    def state(self) -> ExecutionState:
        return self._state

    @property
    def history(self) -> tuple[ExecutionTransition, ...]:
        return tuple(self._history)

    @property
    def rejection_tag(self) -> Optional[str]:
        return self._rejection_tag

    @property
    def is_terminal(self) -> bool:
        return self._state in TERMINAL_STATES

    def advance(self, new_state: ExecutionState, reason: str = "") -> ExecutionTransition:
        """Переход к следующему состоянию happy path.

        Raises:
            IllegalStateTransition: если new_state не следующий по happy path
        """
        if self.is_terminal:
            raise IllegalStateTransition(f"{self._state.value} is terminal")

        expected = HAPPY_PATH[HAPPY_PATH.index(self._state) + 1]
        if new_state != expected:
            raise IllegalStateTransition(
                f"{self._state.value} → {new_state.value} (expected {expected.value})"
            )

        return self._record(new_state, reason)

    def reject(self, tag: str, reason: str = "") -> ExecutionTransition:
        """Переход в REJECTED из любого нетерминального состояния."""
        if self.is_terminal:
            raise IllegalStateTransition(f"{self._state.value} is terminal")

        self._rejection_tag = tag
        return self._record(ExecutionState.REJECTED, reason or tag)

    def _record(self, new_state: ExecutionState, reason: str) -> ExecutionTransition:
        transition = ExecutionTransition(
            previous_state=self._state,
            new_state=new_state,
            reason=reason,
        )
        self._history.append(transition)
        self._state = new_state
        return transition

"""Configuration wizard: collects the five filter criteria one reply at a time.

States advance strictly in order. Invalid input re-prompts and leaves the
state unchanged; nothing is written until the last value is accepted, at
which point the full FilterCriteria record replaces the user's previous one.
"""

import math
import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import structlog

from walletscreen.constants import messages
from walletscreen.core.exceptions import WizardFinishedError
from walletscreen.data.condition_store import ConditionStore
from walletscreen.models.criteria import FilterCriteria

log = structlog.get_logger(__name__)

# Leading number, as in "15", "-2.5", ".5", "1e3" or "15 minutes"
_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")


def parse_number(text: str) -> float | None:
    """Parse the leading number of a reply; None if there is none or it isn't finite."""
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        return None
    value = float(match.group())
    return value if math.isfinite(value) else None


def parse_integer(text: str) -> int | None:
    """Parse the leading integer of a reply (``"7.5"`` gives 7)."""
    match = _INT_PREFIX.match(text)
    return int(match.group()) if match else None


class WizardState(Enum):
    """Wizard steps, in order."""

    ASK_AVG_TIME = "ask_avg_time"
    ASK_NET_PL = "ask_net_pl"
    ASK_BALANCE = "ask_balance"
    ASK_WIN_RATE = "ask_win_rate"
    ASK_LAST_TRADE_DAYS = "ask_last_trade_days"
    DONE = "done"


@dataclass(frozen=True)
class WizardReply:
    """Text to send back, and whether the wizard has completed."""

    text: str
    finished: bool = False


@dataclass(frozen=True)
class _Step:
    field: str
    parse: Callable[[str], float | int | None]
    is_valid: Callable[[float], bool]
    error: str
    next_state: WizardState
    next_prompt: str | None


_STEPS: dict[WizardState, _Step] = {
    WizardState.ASK_AVG_TIME: _Step(
        field="avg_trading_time_minutes",
        parse=parse_number,
        is_valid=lambda v: v >= 0,
        error=messages.INVALID_AVG_TIME,
        next_state=WizardState.ASK_NET_PL,
        next_prompt=messages.ASK_NET_PL,
    ),
    WizardState.ASK_NET_PL: _Step(
        field="net_pl_min_sol",
        parse=parse_number,
        is_valid=lambda v: True,
        error=messages.INVALID_NET_PL,
        next_state=WizardState.ASK_BALANCE,
        next_prompt=messages.ASK_BALANCE,
    ),
    WizardState.ASK_BALANCE: _Step(
        field="balance_min_sol",
        parse=parse_number,
        is_valid=lambda v: True,
        error=messages.INVALID_BALANCE,
        next_state=WizardState.ASK_WIN_RATE,
        next_prompt=messages.ASK_WIN_RATE,
    ),
    WizardState.ASK_WIN_RATE: _Step(
        field="win_rate_min_percent",
        parse=parse_number,
        is_valid=lambda v: 0 <= v <= 100,
        error=messages.INVALID_WIN_RATE,
        next_state=WizardState.ASK_LAST_TRADE_DAYS,
        next_prompt=messages.ASK_LAST_TRADE_DAYS,
    ),
    WizardState.ASK_LAST_TRADE_DAYS: _Step(
        field="last_trade_max_days_ago",
        parse=parse_integer,
        is_valid=lambda v: v >= 0,
        error=messages.INVALID_LAST_TRADE_DAYS,
        next_state=WizardState.DONE,
        next_prompt=None,
    ),
}


class ConfigurationWizard:
    """One run of the criteria wizard for one user.

    Example:
        wizard = ConfigurationWizard("12345", store)
        await reply(wizard.start())
        reply_ = wizard.handle("15")   # -> asks for net P&L
    """

    def __init__(self, user_id: str, store: ConditionStore) -> None:
        self.user_id = user_id
        self._store = store
        self.state = WizardState.ASK_AVG_TIME
        self._values: dict[str, float | int] = {}

    def start(self) -> str:
        """Reset to the first step and return its prompt."""
        self.state = WizardState.ASK_AVG_TIME
        self._values = {}
        return messages.WIZARD_INTRO

    @property
    def finished(self) -> bool:
        return self.state is WizardState.DONE

    def handle(self, text: str) -> WizardReply:
        """Consume one reply.

        Returns:
            The next prompt, a re-prompt on invalid input, or the summary of
            the saved criteria once the last step is accepted.

        Raises:
            WizardFinishedError: If the wizard already completed.
            StorageError: If the completed criteria cannot be persisted.
        """
        if self.finished:
            raise WizardFinishedError(f"wizard for user {self.user_id} already completed")

        step = _STEPS[self.state]
        value = step.parse(text)
        if value is None or not step.is_valid(value):
            log.debug("wizard_input_rejected", user_id=self.user_id, state=self.state.value)
            return WizardReply(step.error)

        self._values[step.field] = value
        if step.next_state is not WizardState.DONE:
            self.state = step.next_state
            return WizardReply(step.next_prompt or "")

        criteria = FilterCriteria(**self._values)
        self._store.set(self.user_id, criteria)
        self.state = WizardState.DONE
        log.info("wizard_completed", user_id=self.user_id)
        return WizardReply(
            f"{messages.CONFIGURED_HEADER}\n\n{criteria.summary()}", finished=True
        )

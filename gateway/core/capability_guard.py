"""
CapabilityGuard - Startup dispatch stack enforcement.

Runs once, before the gateway application is constructed.

RULES (evaluated in order, first match wins):
1. Synchronous stack installed in a synchronous-serving process -> ABORT
2. Reactive stack not installed -> PROCEED_WITH_WARNING
3. Otherwise -> PROCEED

The guard only reads the capability oracle and the runtime mode.
Aborting is returned as an outcome; the bootstrap sequencer raises it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import AbstractSet, Optional

from gateway.core import config
from gateway.core.capability_registry import CapabilityOracle
from gateway.core.observability import get_logger
from gateway.core.runtime_mode import RuntimeMode

logger = get_logger('startup.guard')

BORDER = "\n\n**********************************************************\n\n"


class ConflictingCapabilityError(RuntimeError):
    """
    Raised when the synchronous dispatch stack is installed in a process
    that serves synchronous requests.

    The gateway runs on the reactive stack only. This is not a generic
    configuration error: the process must be restarted with a corrected
    set of installed packages.
    """

    def __init__(self, runtime_mode: RuntimeMode):
        self.runtime_mode = runtime_mode
        self.conflicting = (config.SYNCHRONOUS_DISPATCH_STACK, config.REACTIVE_DISPATCH_STACK)
        super().__init__(
            "CONFLICTING_DISPATCH_STACK: the synchronous dispatch stack "
            f"('{config.SYNCHRONOUS_DISPATCH_MODULE}') was found in a "
            f"{runtime_mode.value} serving process. "
            "The gateway requires the reactive dispatch stack exclusively."
        )


class MissingOptionalCapabilityWarning(UserWarning):
    """Reactive dispatch stack is missing. Logged, never raised."""
    pass


class GuardOutcomeKind(Enum):
    PROCEED = "proceed"
    PROCEED_WITH_WARNING = "proceed_with_warning"
    ABORT = "abort"


@dataclass(frozen=True)
class GuardOutcome:
    """Result of a single guard evaluation."""
    kind: GuardOutcomeKind
    message: Optional[str] = None
    error: Optional[ConflictingCapabilityError] = field(default=None, compare=False)
    warning: Optional[MissingOptionalCapabilityWarning] = field(default=None, compare=False)

    @property
    def is_abort(self) -> bool:
        return self.kind is GuardOutcomeKind.ABORT

    def raise_if_aborted(self) -> None:
        if not self.is_abort:
            return
        if self.error is not None:
            raise self.error
        # ABORT without a carried error still aborts
        raise ConflictingCapabilityError(RuntimeMode.SYNCHRONOUS)

    @classmethod
    def proceed(cls) -> "GuardOutcome":
        return cls(GuardOutcomeKind.PROCEED)

    @classmethod
    def proceed_with_warning(cls, message: str) -> "GuardOutcome":
        return cls(
            GuardOutcomeKind.PROCEED_WITH_WARNING,
            message=message,
            warning=MissingOptionalCapabilityWarning(message),
        )

    @classmethod
    def abort(cls, error: ConflictingCapabilityError) -> "GuardOutcome":
        return cls(GuardOutcomeKind.ABORT, message=str(error), error=error)


def missing_reactive_stack_message() -> str:
    return (
        BORDER
        + "The reactive dispatch stack is missing from the environment, "
        + "which is required for the gateway at this time. "
        + f"Please install the '{config.REACTIVE_DISPATCH_MODULE}' package."
        + BORDER
    )


def decide(capabilities: AbstractSet[str], runtime_mode: RuntimeMode) -> GuardOutcome:
    """
    Pure decision over the present capability ids and the runtime mode.
    """
    if (
        config.SYNCHRONOUS_DISPATCH_STACK in capabilities
        and runtime_mode.is_synchronous_serving_process()
    ):
        return GuardOutcome.abort(ConflictingCapabilityError(runtime_mode))

    if config.REACTIVE_DISPATCH_STACK not in capabilities:
        return GuardOutcome.proceed_with_warning(missing_reactive_stack_message())

    return GuardOutcome.proceed()


class CapabilityGuard:
    """Reads the dispatch stack capabilities and applies the startup policy."""

    def __init__(self, oracle: CapabilityOracle, runtime_mode: RuntimeMode):
        self._oracle = oracle
        self._runtime_mode = runtime_mode

    @property
    def runtime_mode(self) -> RuntimeMode:
        return self._runtime_mode

    def present_capabilities(self) -> frozenset:
        watched = (config.SYNCHRONOUS_DISPATCH_STACK, config.REACTIVE_DISPATCH_STACK)
        return frozenset(name for name in watched if self._oracle.has_capability(name))

    def evaluate(self) -> GuardOutcome:
        """
        Evaluate the policy once and emit its diagnostics.

        Returns the outcome; an ABORT outcome carries the error for the
        caller to raise.
        """
        outcome = decide(self.present_capabilities(), self._runtime_mode)

        if outcome.kind is GuardOutcomeKind.ABORT:
            logger.error(outcome.message)
        elif outcome.kind is GuardOutcomeKind.PROCEED_WITH_WARNING:
            logger.warning(outcome.message)

        return outcome

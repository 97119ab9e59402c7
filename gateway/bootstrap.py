"""
Bootstrap sequencer for the gateway.

Runs the capability guard exactly once and only then constructs the
gateway application. An ABORT outcome is raised before the application
factory is ever called.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from gateway.core import config
from gateway.core.capability_guard import (
    BORDER,
    CapabilityGuard,
    ConflictingCapabilityError,
    GuardOutcome,
)
from gateway.core.capability_registry import CapabilityOracle, build_default_registry
from gateway.core.observability import get_logger
from gateway.core.runtime_mode import RuntimeMode, resolve_runtime_mode

logger = get_logger('startup.bootstrap')


@dataclass(frozen=True)
class FailureAnalysis:
    """Operator-facing explanation of a startup failure."""
    description: str
    action: str

    def render(self) -> str:
        return (
            BORDER
            + "GATEWAY FAILED TO START\n\n"
            + f"Description:\n\n{self.description}\n\n"
            + f"Action:\n\n{self.action}"
            + BORDER
        )


def analyze_failure(error: BaseException) -> Optional[FailureAnalysis]:
    """
    Remediation text for a conflicting dispatch stack.

    Returns None for any other error; callers rethrow those unchanged.
    """
    if not isinstance(error, ConflictingCapabilityError):
        return None
    return FailureAnalysis(
        description=(
            f"The synchronous dispatch stack ('{config.SYNCHRONOUS_DISPATCH_MODULE}') "
            "was found in the environment, which is incompatible with the gateway."
        ),
        action=(
            "Set GATEWAY_RUNTIME_MODE=reactive or remove the "
            f"'{config.SYNCHRONOUS_DISPATCH_MODULE}' package from the environment."
        ),
    )


class Bootstrap:
    """
    Startup sequence: capability guard, then the application factory.

    The guard runs at most once per instance. Its outcome is final.
    """

    def __init__(
        self,
        app_factory: Callable[[GuardOutcome], Any],
        oracle: Optional[CapabilityOracle] = None,
        runtime_mode: Optional[RuntimeMode] = None,
        enabled: Optional[bool] = None,
    ):
        self._app_factory = app_factory
        self._oracle = oracle if oracle is not None else build_default_registry()
        self._runtime_mode = runtime_mode
        self._enabled = config.GATEWAY_ENABLED if enabled is None else enabled
        self._evaluated = False
        self._outcome: Optional[GuardOutcome] = None
        self._app: Any = None

    @property
    def outcome(self) -> Optional[GuardOutcome]:
        return self._outcome

    def run_guard(self) -> Optional[GuardOutcome]:
        """
        Evaluate the capability guard.

        Returns None without evaluating when the gateway is disabled.
        Repeated calls return the first outcome.
        """
        if self._evaluated:
            return self._outcome
        self._evaluated = True

        if not self._enabled:
            logger.info("Gateway disabled, capability guard skipped")
            return None

        mode = self._runtime_mode
        if mode is None:
            mode = resolve_runtime_mode(self._oracle, config.GATEWAY_RUNTIME_MODE)
        logger.debug(f"Runtime mode resolved: {mode.value}")

        self._outcome = CapabilityGuard(self._oracle, mode).evaluate()
        return self._outcome

    def start(self) -> Any:
        """
        Run the guard, then construct the application.

        Raises ConflictingCapabilityError on ABORT; the factory is not called.
        Returns None when the gateway is disabled; nothing is constructed.
        """
        if self._app is not None:
            return self._app

        outcome = self.run_guard()
        if outcome is None:
            return None
        outcome.raise_if_aborted()

        self._app = self._app_factory(outcome)
        return self._app

"""
Bootstrap ordering tests.

The application factory must never run when the guard aborts.
"""

from __future__ import annotations

import pytest

from gateway import bootstrap as bootstrap_module
from gateway.bootstrap import Bootstrap, analyze_failure
from gateway.core import config
from gateway.core.capability_guard import (
    ConflictingCapabilityError,
    GuardOutcome,
    GuardOutcomeKind,
)
from gateway.core.capability_registry import CapabilityOracle, StaticCapabilities
from gateway.core.runtime_mode import RuntimeMode

SYNC = config.SYNCHRONOUS_DISPATCH_STACK
REACTIVE = config.REACTIVE_DISPATCH_STACK


class RecordingFactory:
    """Stand-in for the gated system's constructor."""

    def __init__(self):
        self.calls = []

    def __call__(self, outcome):
        self.calls.append(outcome)
        return object()


class CountingOracle(CapabilityOracle):

    def __init__(self, names):
        self._names = set(names)
        self.lookups = 0

    def has_capability(self, name: str) -> bool:
        self.lookups += 1
        return name in self._names


@pytest.fixture(autouse=True)
def no_configured_mode(monkeypatch):
    monkeypatch.setattr(config, "GATEWAY_RUNTIME_MODE", None)


class TestBootstrapOrdering:

    def test_abort_never_reaches_factory(self):
        factory = RecordingFactory()
        bootstrap = Bootstrap(factory, oracle=StaticCapabilities({SYNC}),
                              runtime_mode=RuntimeMode.SYNCHRONOUS, enabled=True)

        with pytest.raises(ConflictingCapabilityError):
            bootstrap.start()

        assert factory.calls == []

    def test_repeated_start_after_abort_still_aborts(self):
        factory = RecordingFactory()
        bootstrap = Bootstrap(factory, oracle=StaticCapabilities({SYNC, REACTIVE}),
                              runtime_mode=RuntimeMode.SYNCHRONOUS, enabled=True)

        for _ in range(2):
            with pytest.raises(ConflictingCapabilityError):
                bootstrap.start()

        assert factory.calls == []

    def test_deduced_synchronous_mode_aborts(self):
        """Both stacks installed and no configured mode: synchronous wins"""
        factory = RecordingFactory()
        bootstrap = Bootstrap(factory, oracle=StaticCapabilities({SYNC, REACTIVE}), enabled=True)

        with pytest.raises(ConflictingCapabilityError):
            bootstrap.start()
        assert factory.calls == []

    def test_configured_reactive_mode_avoids_abort(self, monkeypatch):
        monkeypatch.setattr(config, "GATEWAY_RUNTIME_MODE", "reactive")
        factory = RecordingFactory()
        bootstrap = Bootstrap(factory, oracle=StaticCapabilities({SYNC, REACTIVE}), enabled=True)

        bootstrap.start()

        assert len(factory.calls) == 1
        assert factory.calls[0].kind is GuardOutcomeKind.PROCEED

    def test_warning_outcome_passed_to_factory(self):
        factory = RecordingFactory()
        bootstrap = Bootstrap(factory, oracle=StaticCapabilities(),
                              runtime_mode=RuntimeMode.NONE, enabled=True)

        bootstrap.start()

        assert factory.calls[0].kind is GuardOutcomeKind.PROCEED_WITH_WARNING

    def test_guard_runs_once(self):
        oracle = CountingOracle({REACTIVE})
        factory = RecordingFactory()
        bootstrap = Bootstrap(factory, oracle=oracle,
                              runtime_mode=RuntimeMode.REACTIVE, enabled=True)

        first = bootstrap.start()
        lookups = oracle.lookups
        second = bootstrap.start()

        assert first is second
        assert oracle.lookups == lookups
        assert len(factory.calls) == 1
        assert bootstrap.run_guard() is bootstrap.outcome

    def test_disabled_gateway_skips_guard_and_app(self):
        oracle = CountingOracle({SYNC})
        factory = RecordingFactory()
        bootstrap = Bootstrap(factory, oracle=oracle,
                              runtime_mode=RuntimeMode.SYNCHRONOUS, enabled=False)

        assert bootstrap.start() is None

        assert oracle.lookups == 0
        assert factory.calls == []
        assert bootstrap.outcome is None

    def test_abort_without_carried_error_never_reaches_factory(self, monkeypatch):
        """A bare ABORT outcome still stops the sequence"""

        class BareAbortGuard:
            def __init__(self, oracle, runtime_mode):
                pass

            def evaluate(self):
                return GuardOutcome(GuardOutcomeKind.ABORT)

        monkeypatch.setattr(bootstrap_module, "CapabilityGuard", BareAbortGuard)
        factory = RecordingFactory()
        bootstrap = Bootstrap(factory, oracle=StaticCapabilities({REACTIVE}),
                              runtime_mode=RuntimeMode.REACTIVE, enabled=True)

        with pytest.raises(ConflictingCapabilityError):
            bootstrap.start()

        assert factory.calls == []

    def test_invalid_configured_mode_is_not_a_conflict(self, monkeypatch):
        monkeypatch.setattr(config, "GATEWAY_RUNTIME_MODE", "cgi")
        factory = RecordingFactory()
        bootstrap = Bootstrap(factory, oracle=StaticCapabilities(), enabled=True)

        with pytest.raises(ValueError):
            bootstrap.start()
        assert factory.calls == []


class TestFailureAnalysis:

    def test_conflict_has_remediation(self):
        analysis = analyze_failure(ConflictingCapabilityError(RuntimeMode.SYNCHRONOUS))
        assert analysis is not None
        assert "incompatible with the gateway" in analysis.description
        assert "GATEWAY_RUNTIME_MODE=reactive" in analysis.action
        rendered = analysis.render()
        assert "GATEWAY FAILED TO START" in rendered
        assert analysis.action in rendered

    def test_other_errors_are_not_analyzed(self):
        assert analyze_failure(RuntimeError("boom")) is None
        assert analyze_failure(ValueError("bad mode")) is None

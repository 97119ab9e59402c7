"""
Runtime mode of the hosting process.

A process either serves requests on the synchronous stack, serves them on
the reactive stack, or does not serve requests at all (tools, tests).
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from gateway.core import config
from gateway.core.capability_registry import CapabilityOracle


class RuntimeMode(Enum):
    SYNCHRONOUS = "synchronous"
    REACTIVE = "reactive"
    NONE = "none"

    def is_synchronous_serving_process(self) -> bool:
        return self is RuntimeMode.SYNCHRONOUS

    @classmethod
    def parse(cls, value: str) -> "RuntimeMode":
        """Parse a configured mode name. Accepts wsgi/servlet and asgi aliases."""
        normalized = value.strip().lower()
        aliases = {
            "wsgi": cls.SYNCHRONOUS,
            "servlet": cls.SYNCHRONOUS,
            "asgi": cls.REACTIVE,
        }
        if normalized in aliases:
            return aliases[normalized]
        for mode in cls:
            if mode.value == normalized:
                return mode
        accepted = ", ".join([m.value for m in cls] + sorted(aliases))
        raise ValueError(
            f"Unknown runtime mode '{value}'. Accepted values: {accepted}."
        )


def deduce_runtime_mode(oracle: CapabilityOracle) -> RuntimeMode:
    """
    Deduce the runtime mode from the installed dispatch stacks.

    The synchronous stack wins when both are installed.
    """
    has_synchronous = oracle.has_capability(config.SYNCHRONOUS_DISPATCH_STACK)
    if oracle.has_capability(config.REACTIVE_DISPATCH_STACK) and not has_synchronous:
        return RuntimeMode.REACTIVE
    if not has_synchronous:
        return RuntimeMode.NONE
    return RuntimeMode.SYNCHRONOUS


def resolve_runtime_mode(
    oracle: CapabilityOracle,
    configured: Optional[str] = None,
) -> RuntimeMode:
    """Configured mode wins; otherwise deduce from the oracle."""
    if configured:
        return RuntimeMode.parse(configured)
    return deduce_runtime_mode(oracle)

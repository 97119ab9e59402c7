"""
Capability Registry

Answers whether a named runtime capability is present in this process.
Capabilities map to importable modules; presence is checked with a module
lookup and the module is never imported.
"""

import importlib.util
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional

from gateway.core import config
from gateway.core.observability import get_logger

logger = get_logger('startup.capabilities')


class CapabilityOracle(ABC):
    """Read-only view of the capabilities installed in the running process."""

    @abstractmethod
    def has_capability(self, name: str) -> bool:
        """
        Return True if the capability is present.

        Must not raise. Absence is a normal answer.
        """
        pass


def module_available(module_name: str) -> bool:
    """Check whether a module can be found without importing it."""
    if not module_name:
        return False
    try:
        return importlib.util.find_spec(module_name) is not None
    except Exception as e:
        # find_spec on "a.b" imports "a"; a missing or broken parent means absent
        logger.debug(f"Module lookup for '{module_name}' failed: {e!r}")
        return False


class CapabilityRegistry(CapabilityOracle):
    """Registry of named capabilities backed by module lookups."""

    def __init__(self):
        self._capabilities: Dict[str, Dict[str, Any]] = {}

    def register_capability(self, name: str, module: str, description: str,
                            install_hint: str = ""):
        """Register a capability and the module that marks it as installed."""
        self._capabilities[name] = {
            "module": module,
            "description": description,
            "install_hint": install_hint,
        }
        logger.debug(f"Capability '{name}' registered (module: {module})")

    def has_capability(self, name: str) -> bool:
        info = self._capabilities.get(name)
        if info is None:
            return False
        return module_available(info["module"])

    def get_capability_info(self, name: str) -> Dict[str, Any]:
        """Get detailed information about a capability."""
        info = self._capabilities.get(name)
        if info is None:
            return {}
        return {**info, "available": module_available(info["module"])}

    def get_missing_capabilities(self) -> Dict[str, Dict[str, Any]]:
        """Get all registered capabilities that are not installed."""
        return {
            name: self.get_capability_info(name)
            for name in self._capabilities
            if not self.has_capability(name)
        }

    def log_status_summary(self):
        """Log a summary of all capability statuses."""
        total = len(self._capabilities)
        missing = self.get_missing_capabilities()

        logger.info(f"Capability summary: {total - len(missing)}/{total} capabilities present")

        for name, info in missing.items():
            hint = info.get("install_hint")
            suffix = f" - Install with: {hint}" if hint else ""
            logger.info(f"  - {name} missing: {info['description']}{suffix}")


class StaticCapabilities(CapabilityOracle):
    """Capabilities declared up front instead of probed."""

    def __init__(self, names: Optional[Iterable[str]] = None):
        self._names = frozenset(names or ())

    def has_capability(self, name: str) -> bool:
        return name in self._names

    def __repr__(self):
        return f"StaticCapabilities({sorted(self._names)!r})"


def build_default_registry() -> CapabilityRegistry:
    """Registry with both dispatch stacks mapped to their configured modules."""
    registry = CapabilityRegistry()
    registry.register_capability(
        config.SYNCHRONOUS_DISPATCH_STACK,
        config.SYNCHRONOUS_DISPATCH_MODULE,
        "Synchronous (WSGI) dispatch stack",
    )
    registry.register_capability(
        config.REACTIVE_DISPATCH_STACK,
        config.REACTIVE_DISPATCH_MODULE,
        "Reactive (ASGI) dispatch stack",
        install_hint=f"pip install {config.REACTIVE_DISPATCH_MODULE}",
    )
    return registry

"""
Core configuration and startup primitives for the gateway.

Modules:
- config: environment flags, capability module names, server settings.
- observability: logging setup and component loggers
- capability_registry: capability oracle and module-backed registry
- runtime_mode: how the hosting process is running
- capability_guard: startup dispatch stack policy
"""

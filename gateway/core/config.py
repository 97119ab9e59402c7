import os
from pathlib import Path
from typing import Optional

"""
Central configuration for the gateway bootstrap.
Environment-driven flags, capability module names and server settings live here.
"""


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_optional(name: str) -> Optional[str]:
    raw = os.environ.get(name, "").strip()
    return raw or None


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(
            f"Environment variable '{name}' must be an integer, got '{raw}'."
        )


# ---- Gateway toggle ----
# When disabled the capability guard is skipped entirely.
GATEWAY_ENABLED = _env_flag("GATEWAY_ENABLED", True)

# ---- Runtime mode ----
# "synchronous", "reactive" or "none". Unset means deduce from installed stacks.
GATEWAY_RUNTIME_MODE = _env_optional("GATEWAY_RUNTIME_MODE")

# ---- Dispatch stack capabilities ----
SYNCHRONOUS_DISPATCH_STACK = "synchronous-dispatch-stack"
REACTIVE_DISPATCH_STACK = "reactive-dispatch-stack"

# Importable module whose presence marks each stack as installed.
SYNCHRONOUS_DISPATCH_MODULE = os.environ.get("GATEWAY_SYNCHRONOUS_DISPATCH_MODULE", "flask")
REACTIVE_DISPATCH_MODULE = os.environ.get("GATEWAY_REACTIVE_DISPATCH_MODULE", "starlette")

# ---- Logging ----
LOG_LEVEL = os.environ.get("GATEWAY_LOG_LEVEL", "INFO").upper()
LOG_FILE: Optional[Path] = (
    Path(_env_optional("GATEWAY_LOG_FILE")) if _env_optional("GATEWAY_LOG_FILE") else None
)

# ---- Server bind ----
SERVER_HOST = os.environ.get("GATEWAY_HOST", "0.0.0.0")
SERVER_PORT = _env_int("GATEWAY_PORT", 8000)

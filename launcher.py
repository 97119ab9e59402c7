import sys
from typing import Any, Callable, Optional

from gateway.bootstrap import Bootstrap, analyze_failure
from gateway.core import config
from gateway.core.capability_guard import ConflictingCapabilityError
from gateway.core.capability_registry import build_default_registry
from gateway.core.observability import get_logger, setup_logging
from gateway.gateway_server import create_app


def serve(app: Any) -> None:
    import uvicorn

    uvicorn.run(app, host=config.SERVER_HOST, port=config.SERVER_PORT, log_level="info")


def main(run_server: Optional[Callable[[Any], None]] = None) -> int:
    setup_logging(config.LOG_LEVEL, config.LOG_FILE)
    logger = get_logger('startup.launcher')

    registry = build_default_registry()
    bootstrap = Bootstrap(create_app, oracle=registry)

    try:
        app = bootstrap.start()
    except ConflictingCapabilityError as exc:
        analysis = analyze_failure(exc)
        print(analysis.render(), file=sys.stderr)
        return 1

    if app is None:
        logger.info("Gateway disabled (GATEWAY_ENABLED=false), nothing to serve")
        return 0

    registry.log_status_summary()
    logger.info(f"Starting gateway on {config.SERVER_HOST}:{config.SERVER_PORT}")
    (run_server or serve)(app)
    return 0


if __name__ == "__main__":
    sys.exit(main())

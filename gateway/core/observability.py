"""
Observability Configuration for the Gateway

Provides a consistent logging schema for the startup sequence and the
gateway application.
"""

import logging
import logging.config
import sys
from pathlib import Path
from typing import Optional


class ComponentFilter(logging.Filter):
    """Ensure every record carries a component field."""

    def filter(self, record):
        if not hasattr(record, "component"):
            record.component = record.name
        return True


class ComponentAdapter(logging.LoggerAdapter):
    """Logger adapter that adds component context."""

    def __init__(self, logger, component: str):
        super().__init__(logger, {'component': component})

    def process(self, msg, kwargs):
        kwargs.setdefault('extra', {})['component'] = self.extra['component']
        return msg, kwargs


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> None:
    """
    Configure logging for the gateway process.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for logging output
    """

    config = {
        'version': 1,
        'disable_existing_loggers': False,
        'filters': {
            'component': {
                '()': ComponentFilter,
            },
        },
        'formatters': {
            'detailed': {
                'format': '%(asctime)s [%(levelname)s] %(component)s %(name)s - %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
            'simple': {
                'format': '[%(levelname)s] %(component)s - %(message)s'
            }
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'level': level,
                'formatter': 'simple',
                'stream': sys.stdout,
                'filters': ['component']
            }
        },
        'root': {
            'level': level,
            'handlers': ['console']
        }
    }

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        config['handlers']['file'] = {
            'class': 'logging.FileHandler',
            'level': level,
            'formatter': 'detailed',
            'filename': str(log_file),
            'filters': ['component']
        }
        config['root']['handlers'].append('file')

    logging.config.dictConfig(config)


def get_logger(component: str) -> ComponentAdapter:
    """
    Get a logger for a specific component.

    Args:
        component: Component name (e.g., 'startup.guard', 'server')

    Returns:
        Logger adapter with component context
    """
    logger = logging.getLogger(f'gateway.{component}')
    return ComponentAdapter(logger, component)

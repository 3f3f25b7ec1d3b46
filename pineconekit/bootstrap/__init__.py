"""
Bootstrap package: application entry point and CLI.
"""

from .app import AppOptions, install_error_handlers, run_app, validate_env
from .cli import main, parse_args

__all__ = [
    "AppOptions",
    "install_error_handlers",
    "main",
    "parse_args",
    "run_app",
    "validate_env",
]

"""
CLI command implementations.

Each command is implemented in its own module.
"""

from . import inspect, options, render, validate

__all__ = ["inspect", "options", "render", "validate"]

"""Petridish - project scaffolding from parameterized template trees.

A Jinja2-driven renderer that materializes a template directory into a new
project, with plan-then-commit conflict handling.
"""

__version__ = "0.1.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Re-export main CLI entry point
from .cli import main

__all__ = ["main"]

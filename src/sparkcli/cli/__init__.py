"""
CLI interface package for sparkcli.

This package contains the command-line application and its output helpers.
"""

__all__ = ["app", "output"]

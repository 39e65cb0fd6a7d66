"""
Configuration package for sparkcli.

This package contains the persistent OAuth/endpoint configuration record,
its file store, and the process-level CLI settings.
"""

__all__ = ["settings", "store"]

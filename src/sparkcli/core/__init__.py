"""
Core package for sparkcli.

Contains the error hierarchy, the authenticated HTTP client and the OAuth
login coordinator.
"""

"""Core (UI-agnostic) resource directory logic.

This package contains:
- dataset loading (CSV -> pandas)
- tag extraction
- query normalization + filtering
- pagination
- HTML rendering and chart helpers for the consumers
"""

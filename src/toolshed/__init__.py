"""
Toolshed household tool inventory package.

The package exposes barcode identity resolution, the task tool matcher, AI-backed
analysis workflows, persistence helpers, and the HTTP/CLI entry points.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"

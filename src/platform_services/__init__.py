"""
Multi-backend service composition layer.

Resolves, caches and aggregates per-platform domain adapters behind one
interface per domain.
"""

__version__ = "1.0.0"

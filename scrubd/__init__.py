"""Detect leaked container runtime resources from supplied inventories and run cleanup plans."""

__version__ = "0.1.0"

__all__ = ["__version__"]
"""Personal tracker for YKS practice exam results."""

__version__ = "0.1.0"

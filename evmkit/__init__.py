"""Ethereum Virtual Machine primitives and precompiled contracts."""

__version__ = "0.1.0"
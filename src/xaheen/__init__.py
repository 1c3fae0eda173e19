"""Xaheen: code generation and service injection for JavaScript projects."""

__version__ = "0.1.0"

"""Descriptor linking and rule-driven code generation for protoc."""

__version__ = "0.1.0"

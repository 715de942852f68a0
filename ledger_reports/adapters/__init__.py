"""Outer adapters (CLI entry points and user interfaces)."""

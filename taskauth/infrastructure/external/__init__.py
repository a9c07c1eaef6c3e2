"""Adapters for external systems (e-mail)."""

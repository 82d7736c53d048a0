"""Shared utilities (logging, numeric helpers)."""

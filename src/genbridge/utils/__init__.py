"""Shared exceptions and the Result type."""

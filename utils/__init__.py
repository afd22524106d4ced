"""Shared utilities: configuration of logging, datetime helpers, validation."""

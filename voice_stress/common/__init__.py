"""Shared logging, configuration and metrics helpers."""

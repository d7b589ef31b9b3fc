"""Shared utilities for the natural selection engine."""

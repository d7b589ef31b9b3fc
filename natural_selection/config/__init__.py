"""Configuration constants and dataclasses for the natural selection engine."""

"""Fragments service: owner-scoped blob storage with on-demand format conversion."""

__version__ = "0.5.0"

"""Orchestration services used by the CLI."""

"""Core: configuration, domain, errors and services.

Adapters and the CLI depend on the core, never the other way around, except
for the services layer that wires adapters together.
"""

"""Concrete adapters: request file parsing, httpx transport, echo server, exporters."""

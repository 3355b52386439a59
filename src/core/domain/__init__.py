"""Domain models and entities.

Why:
- Pure, strict data structures (Pydantic v2) live here.
- The domain knows nothing about sockets, httpx or the CLI: only request files,
  requests and their results.
"""

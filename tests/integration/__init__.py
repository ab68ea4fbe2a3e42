"""Integration tests for components working together as a system.

No fakes between the HTTP client and the session controller.

Coverage:
    - Streaming requests against a FastAPI stub backend
    - Exact chunk boundaries through httpx MockTransport
    - HTTP status and network failure handling

Runs fully in-process; no external services required.
"""

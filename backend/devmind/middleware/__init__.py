# Middleware package init
"""
DevMind Backend — Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID first, so every later log line can be correlated
    2. Logging measures the full handler duration, including the vendor call
"""

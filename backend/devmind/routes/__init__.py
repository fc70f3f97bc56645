# Routes package init
"""
DevMind Backend — API Routes Package
======================================

Route Inventory:
    - ai.py:         POST /api/ai, POST /api/ai/chat
    - providers.py:  /api/providers (list, activate, register, remove, validate)
    - health.py:     GET  /health

Design Principle:
    Routes are THIN: parse the body, call the registry or AssistanceService,
    shape the response. The one decision they own is substituting empty
    results for best-effort tasks when the vendor call fails.
"""

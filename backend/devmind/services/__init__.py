# Services package init
"""
DevMind Backend — Services Layer
==================================

What:  Business logic between routes (HTTP) and the provider layer.
Why:   Routes handle HTTP; services decide what to ask the AI and how to
       shape its answer.

Service Inventory:
    - prompts.py:     Static per-task (system, user) prompt templates
    - assistance.py:  AssistanceService facade and reply post-processing
"""

"""
DevMind Backend — Application Package Initializer
==================================================

What: Marks the `devmind` directory as a Python package.
Why:  Enables module imports like `from devmind.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend is the AI half of the DevMind note-taking app. Notes, timeline
    and mind-map state live elsewhere; this service answers "help me with this
    text" requests through whichever AI vendor is currently active.

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      Services (Assistance Facade)   │  ← Prompts + post-processing
    ├─────────────────────────────────────┤
    │     Providers (Registry + Adapters) │  ← Vendor selection, translation
    ├─────────────────────────────────────┤
    │   Vendor SDKs (OpenAI/Gemini/Claude)│  ← One private client per adapter
    └─────────────────────────────────────┘

    Each layer only talks to the one directly below it, so the facade never
    knows which vendor answered and routes never see a vendor response object.
"""

__version__ = "1.0.0"

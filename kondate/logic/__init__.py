"""Core business logic layer.

Subpackages:
- window: rolling 3-day window computation, migration and legacy plan adaptation
- catalog: meal catalog helpers (input suggestions)
- history: archive ordering for the history page

Nothing here touches storage directly except ``window.service``, which
coordinates the repositories around a migration.
"""
__all__ = ["window", "catalog", "history"]

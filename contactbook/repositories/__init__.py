"""
Persistence adapters.

``queries`` builds statements, ``mapper`` converts rows to domain values and
back, and ``ContactRepository`` runs them inside per-call sessions.
"""

from .contact_repository import ContactRepository

__all__ = ["ContactRepository"]

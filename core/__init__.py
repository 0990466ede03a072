"""
Core business logic - framework-agnostic.
Used by the web API, the archival scheduler, or any other interface.
"""

# Database (SQLAlchemy)
from .database import get_connection, get_transaction, get_engine, close_engine, is_configured

# Acting identity
from .access import Identity, effective_identity, can_edit_document, is_owner_or_admin

# Challenge operations
from .challenges import get_archive_view
from .archival import archive_ended_challenges

__all__ = [
    # Database (SQLAlchemy)
    'get_connection', 'get_transaction', 'get_engine', 'close_engine', 'is_configured',
    # Identity
    'Identity', 'effective_identity', 'can_edit_document', 'is_owner_or_admin',
    # Challenges
    'get_archive_view', 'archive_ended_challenges',
]

"""
Utilities Package

Helpers shared across the service:
- locks.py: RWLock, the reader/writer lock guarding each store
"""

from book_service.utils.locks import RWLock

__all__ = ["RWLock"]

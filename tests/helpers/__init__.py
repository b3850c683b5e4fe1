"""
Test helpers for the SQL table gateway.

This module provides row models for the test tables and a driver wrapper
that records every statement, used to verify round-trip counts.
"""

from .drivers import CountingDriver
from .models import Document, User

__all__ = [
    'CountingDriver',
    'Document',
    'User',
]

"""Quotes — full quote and quick preview generation, coverage text, history."""

from motorquote.quotes.history import QuoteHistory, QuoteHistoryEntry
from motorquote.quotes.service import IdGenerator, IncompleteRequestError, QuoteService, UuidGenerator

__all__ = [
    "QuoteService",
    "IncompleteRequestError",
    "IdGenerator",
    "UuidGenerator",
    "QuoteHistory",
    "QuoteHistoryEntry",
]

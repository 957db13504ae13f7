"""
Persistence adapters.

Services depend on the repository rather than on SQLAlchemy sessions, so the
controllers never issue queries themselves.
"""

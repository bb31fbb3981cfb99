"""Persistence layer: SQLAlchemy engine/session management, models and repositories."""

"""Database Infrastructure — SQLAlchemy Base shared by models and migrations."""

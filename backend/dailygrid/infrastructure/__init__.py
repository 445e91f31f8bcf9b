"""Infrastructure Layer — database access, dataset adapters, and logging.

Invariants:
    - Implements the Protocols in core/repository_protocols.py
    - SQLAlchemy errors never escape as-is: mapped to DatabaseError or
      DatasetUnavailableError at this boundary
"""

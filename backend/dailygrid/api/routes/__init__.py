"""Route Modules — one file per surface: public grid, cell checks, admin, health.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Admin modules attach require_admin at router level, never per route
    - Routes never contain business logic (delegate to services)

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""

"""ORM Models — SQLAlchemy declarative models for the dataset, cache and templates.

Invariants:
    - All models inherit from Base (db/base.py)
    - players / tournaments / player_achievements / player_rankings are read-only here

Design Decisions:
    - One file per entity
    - All models imported here so string-based relationship() references resolve
      before any query runs
"""

from dailygrid.models.player import Player  # noqa: F401
from dailygrid.models.tournament import Tournament  # noqa: F401
from dailygrid.models.player_achievement import PlayerAchievement  # noqa: F401
from dailygrid.models.player_ranking import PlayerRanking  # noqa: F401
from dailygrid.models.grid_template import GridTemplate  # noqa: F401
from dailygrid.models.cached_daily_grid import CachedDailyGrid  # noqa: F401

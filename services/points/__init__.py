# Points economy: ledger, discovery validation, leaderboards

from .ledger import AwardResult, award_points, reconcile_user_aggregates, reconcile_all_users
from .discovery import DiscoveryCheck, validate_discovery

__all__ = [
    "AwardResult",
    "award_points",
    "reconcile_user_aggregates",
    "reconcile_all_users",
    "DiscoveryCheck",
    "validate_discovery",
]

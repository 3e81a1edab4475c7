# Community moderation: votes, consensus and flags

from .votes import VoteState, cast_vote, get_vote_state
from .flags import submit_flag, list_flags

__all__ = [
    "VoteState",
    "cast_vote",
    "get_vote_state",
    "submit_flag",
    "list_flags",
]

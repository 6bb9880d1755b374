"""Card-counting trainer engine - 100% UI-agnostic."""

from trainer.ranks import Rank, normalize_rank, rank_value
from trainer.hand import Hand
from trainer.settings import Settings
from trainer.engine import ActionResult, CountTrainer, Snapshot

__all__ = [
    "Rank",
    "normalize_rank",
    "rank_value",
    "Hand",
    "Settings",
    "ActionResult",
    "CountTrainer",
    "Snapshot",
]

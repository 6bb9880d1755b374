"""Strategy tables, deviations and play recommendations."""

from trainer.strategy.rules import RuleSet
from trainer.strategy.basic import BasicStrategy, Action
from trainer.strategy.deviations import IndexPlay, ILLUSTRIOUS_18, FAB_4, INSURANCE_INDEX
from trainer.strategy.advisor import Recommendation, recommend

__all__ = [
    "RuleSet",
    "BasicStrategy",
    "Action",
    "IndexPlay",
    "ILLUSTRIOUS_18",
    "FAB_4",
    "INSURANCE_INDEX",
    "Recommendation",
    "recommend",
]

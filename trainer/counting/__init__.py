"""Card counting systems, registered by identifier."""

from typing import Mapping

from trainer.counting.base import CountSystem, expected_aces
from trainer.counting.hilo import HI_LO
from trainer.counting.hiopt2 import HI_OPT_II
from trainer.counting.omega2 import OMEGA_II
from trainer.counting.wong_halves import WONG_HALVES

DEFAULT_SYSTEM_ID = HI_LO.id

COUNT_SYSTEMS: Mapping[str, CountSystem] = {
    system.id: system for system in (HI_LO, WONG_HALVES, HI_OPT_II, OMEGA_II)
}


def get_count_system(system_id: str) -> CountSystem:
    """
    Look up a registered count system.

    Raises:
        KeyError: If no system is registered under ``system_id``
    """
    return COUNT_SYSTEMS[system_id]


__all__ = [
    "COUNT_SYSTEMS",
    "DEFAULT_SYSTEM_ID",
    "CountSystem",
    "HI_LO",
    "HI_OPT_II",
    "OMEGA_II",
    "WONG_HALVES",
    "expected_aces",
    "get_count_system",
]

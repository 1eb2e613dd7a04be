from typing import List, Mapping

from ..domain.entities.community_entity import VaultEntry


class StakeService:
    """
    Pure stake arithmetic over a contract vault at a given ledger height.
    Used to weight trading posts by reputation.
    """

    STAKE_WEIGHT = 1 / 2
    TIME_STAKED_WEIGHT = 1 / 3
    BALANCE_WEIGHT = 1 / 6

    @staticmethod
    def get_stake(address: str, vault: Mapping[str, List[VaultEntry]], height: int) -> float:
        return sum(e.balance for e in vault.get(address, []) if e.is_locked_at(height))

    @staticmethod
    def get_time_staked(address: str, vault: Mapping[str, List[VaultEntry]], height: int) -> int:
        """Longest lock duration (end - start) among entries still locked."""
        durations = [e.end - e.start for e in vault.get(address, []) if e.is_locked_at(height)]
        return max([0, *durations])

    @classmethod
    def reputation(cls, stake: float, time_staked: float, balance: float) -> float:
        score = (
            stake * cls.STAKE_WEIGHT
            + time_staked * cls.TIME_STAKED_WEIGHT
            + balance * cls.BALANCE_WEIGHT
        )
        return round(score, 3)

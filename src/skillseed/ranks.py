"""Static rank distributions and MMR ranges per playlist, with binary-search lookup."""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

CANONICAL_TIER_ORDER: tuple[str, ...] = (
    "Bronze 1", "Bronze 2", "Bronze 3",
    "Silver 1", "Silver 2", "Silver 3",
    "Gold 1", "Gold 2", "Gold 3",
    "Platinum 1", "Platinum 2", "Platinum 3",
    "Diamond 1", "Diamond 2", "Diamond 3",
    "Champion 1", "Champion 2", "Champion 3",
    "Grand Champion 1", "Grand Champion 2", "Grand Champion 3",
    "Supersonic Legend",
)

# Population share (percent) per tier, season 14 snapshot. Not renormalized.
RANK_DISTRIBUTIONS: Mapping[str, Mapping[str, float]] = MappingProxyType({
    "soloDuel": MappingProxyType({
        "Bronze 1": 0.063, "Bronze 2": 0.296, "Bronze 3": 0.952,
        "Silver 1": 2.248, "Silver 2": 4.383, "Silver 3": 7.353,
        "Gold 1": 11.090, "Gold 2": 14.354, "Gold 3": 16.356,
        "Platinum 1": 16.361, "Platinum 2": 11.923, "Platinum 3": 7.116,
        "Diamond 1": 3.828, "Diamond 2": 1.864, "Diamond 3": 0.921,
        "Champion 1": 0.473, "Champion 2": 0.217, "Champion 3": 0.103,
        "Grand Champion 1": 0.053, "Grand Champion 2": 0.024, "Grand Champion 3": 0.011,
        "Supersonic Legend": 0.013,
    }),
    "doubles": MappingProxyType({
        "Bronze 1": 0.292, "Bronze 2": 0.713, "Bronze 3": 1.485,
        "Silver 1": 2.741, "Silver 2": 4.411, "Silver 3": 6.346,
        "Gold 1": 8.427, "Gold 2": 9.790, "Gold 3": 10.237,
        "Platinum 1": 10.422, "Platinum 2": 9.093, "Platinum 3": 7.552,
        "Diamond 1": 8.364, "Diamond 2": 6.109, "Diamond 3": 4.451,
        "Champion 1": 4.663, "Champion 2": 2.397, "Champion 3": 1.272,
        "Grand Champion 1": 0.809, "Grand Champion 2": 0.293, "Grand Champion 3": 0.087,
        "Supersonic Legend": 0.045,
    }),
    "standard": MappingProxyType({
        "Bronze 1": 0.112, "Bronze 2": 0.347, "Bronze 3": 0.956,
        "Silver 1": 2.316, "Silver 2": 4.882, "Silver 3": 8.466,
        "Gold 1": 12.146, "Gold 2": 13.673, "Gold 3": 12.832,
        "Platinum 1": 11.137, "Platinum 2": 8.700, "Platinum 3": 6.701,
        "Diamond 1": 6.651, "Diamond 2": 4.291, "Diamond 3": 2.742,
        "Champion 1": 2.339, "Champion 2": 0.989, "Champion 3": 0.431,
        "Grand Champion 1": 0.205, "Grand Champion 2": 0.064, "Grand Champion 3": 0.017,
        "Supersonic Legend": 0.003,
    }),
})

_SHARED_LOW_TIERS: dict[str, tuple[float, float]] = {
    "Bronze 1": (0, 152), "Bronze 2": (153, 214), "Bronze 3": (215, 274),
    "Silver 1": (275, 334), "Silver 2": (335, 394), "Silver 3": (395, 454),
    "Gold 1": (455, 514), "Gold 2": (515, 574), "Gold 3": (575, 634),
    "Platinum 1": (635, 694), "Platinum 2": (695, 754),
}

MMR_RANGES: Mapping[str, Mapping[str, tuple[float, float]]] = MappingProxyType({
    "soloDuel": MappingProxyType({
        **_SHARED_LOW_TIERS,
        "Platinum 3": (755, 814),
        "Diamond 1": (815, 874), "Diamond 2": (875, 934), "Diamond 3": (935, 994),
        "Champion 1": (995, 1054), "Champion 2": (1055, 1114), "Champion 3": (1115, 1174),
        "Grand Champion 1": (1175, 1234), "Grand Champion 2": (1235, 1294),
        "Grand Champion 3": (1295, 1354),
        "Supersonic Legend": (1355, 2000),
    }),
    "doubles": MappingProxyType({
        **_SHARED_LOW_TIERS,
        "Platinum 3": (755, 814),
        "Diamond 1": (815, 874), "Diamond 2": (875, 934), "Diamond 3": (935, 994),
        "Champion 1": (995, 1074), "Champion 2": (1075, 1174), "Champion 3": (1175, 1274),
        "Grand Champion 1": (1275, 1374), "Grand Champion 2": (1375, 1474),
        "Grand Champion 3": (1475, 1574),
        "Supersonic Legend": (1575, 2300),
    }),
    "standard": MappingProxyType({
        **_SHARED_LOW_TIERS,
        "Platinum 3": (755, 834),
        "Diamond 1": (835, 914), "Diamond 2": (915, 994), "Diamond 3": (995, 1074),
        "Champion 1": (1075, 1174), "Champion 2": (1175, 1274), "Champion 3": (1275, 1374),
        "Grand Champion 1": (1375, 1474), "Grand Champion 2": (1475, 1574),
        "Grand Champion 3": (1575, 1674),
        "Supersonic Legend": (1675, 2300),
    }),
})


@dataclass(frozen=True)
class RankRange:
    tier: str
    min_mmr: float
    max_mmr: float

    @property
    def span(self) -> float:
        return self.max_mmr - self.min_mmr


@dataclass(frozen=True)
class TierInfo:
    """Share of the population strictly below a tier, and the tier's own share."""

    cumulative_below: float
    percentage: float


@dataclass(frozen=True)
class RankTable:
    """Lookup index for one playlist: ranges sorted by ``min_mmr`` plus cumulative shares."""

    playlist: str
    ranges: tuple[RankRange, ...]
    starts: tuple[float, ...]
    tiers: Mapping[str, TierInfo]

    @property
    def lowest_mmr(self) -> float:
        return self.ranges[0].min_mmr

    @property
    def highest_mmr(self) -> float:
        return self.ranges[-1].max_mmr

    def find_tier(self, mmr: float) -> RankRange | None:
        """Binary-search the tier holding ``mmr``.

        A value in the gap between two integer-bounded tiers resolves to the
        lower tier. Returns None outside ``[lowest_mmr, highest_mmr]``.
        """
        if mmr < self.lowest_mmr or mmr > self.highest_mmr:
            return None
        index = bisect_right(self.starts, mmr) - 1
        return self.ranges[index]


def build_rank_table(
    playlist: str,
    *,
    distributions: Mapping[str, Mapping[str, float]] = RANK_DISTRIBUTIONS,
    mmr_ranges: Mapping[str, Mapping[str, tuple[float, float]]] = MMR_RANGES,
    tier_order: tuple[str, ...] = CANONICAL_TIER_ORDER,
) -> RankTable:
    """Build the sorted range list and cumulative-percentile index for one playlist."""
    if playlist not in distributions or playlist not in mmr_ranges:
        raise KeyError(f"Unknown playlist: {playlist}")

    raw_ranges = mmr_ranges[playlist]
    if not raw_ranges:
        raise ValueError(f"Playlist {playlist} has no MMR ranges")

    ranges: list[RankRange] = []
    for tier, (min_mmr, max_mmr) in raw_ranges.items():
        if max_mmr < min_mmr:
            raise ValueError(f"{playlist}: {tier} has max_mmr < min_mmr")
        ranges.append(RankRange(tier=tier, min_mmr=float(min_mmr), max_mmr=float(max_mmr)))
    ranges.sort(key=lambda rank_range: rank_range.min_mmr)

    for lower, upper in zip(ranges, ranges[1:]):
        if upper.min_mmr < lower.max_mmr:
            raise ValueError(f"{playlist}: {lower.tier} overlaps {upper.tier}")

    distribution = distributions[playlist]
    tiers: dict[str, TierInfo] = {}
    cumulative = 0.0
    for tier in tier_order:
        percentage = distribution.get(tier)
        if percentage is None:
            continue
        tiers[tier] = TierInfo(cumulative_below=cumulative, percentage=percentage)
        cumulative += percentage

    return RankTable(
        playlist=playlist,
        ranges=tuple(ranges),
        starts=tuple(rank_range.min_mmr for rank_range in ranges),
        tiers=MappingProxyType(tiers),
    )


__all__ = [
    "CANONICAL_TIER_ORDER",
    "MMR_RANGES",
    "RANK_DISTRIBUTIONS",
    "RankRange",
    "RankTable",
    "TierInfo",
    "build_rank_table",
]

from dataclasses import dataclass
from typing import Optional

# Tiers in ascending order; every tier below MASTER has four divisions of 100 points each
TIERS = ["IRON", "BRONZE", "SILVER", "GOLD", "PLATINUM", "EMERALD", "DIAMOND", "MASTER", "GRANDMASTER", "CHALLENGER"]
APEX_TIERS = {"MASTER", "GRANDMASTER", "CHALLENGER"}
DIVISIONS = ["IV", "III", "II", "I"]
DIVISION_NUMERALS = {4: "IV", 3: "III", 2: "II", 1: "I"}

POINTS_PER_DIVISION = 100
POINTS_PER_TIER = POINTS_PER_DIVISION * len(DIVISIONS)
APEX_BASE = TIERS.index("MASTER") * POINTS_PER_TIER


@dataclass(frozen=True)
class RankSnapshot:
    tier: Optional[str] = None
    division: Optional[str] = None
    league_points: Optional[int] = None

    @property
    def is_ranked(self) -> bool:
        return bool(self.tier) and self.league_points is not None

    @property
    def is_apex(self) -> bool:
        return bool(self.tier) and self.tier.upper() in APEX_TIERS

    @property
    def ladder_points(self) -> Optional[int]:
        # Absolute position on the ladder, so that promotions and demotions don't break the LP change
        if not self.is_ranked:
            return None

        tier = self.tier.upper()
        if tier not in TIERS:
            return None

        # Master and above have no divisions and share the same base
        if tier in APEX_TIERS:
            return APEX_BASE + self.league_points

        division = (self.division or '').upper()
        if division not in DIVISIONS:
            return None

        return TIERS.index(tier) * POINTS_PER_TIER + DIVISIONS.index(division) * POINTS_PER_DIVISION + self.league_points

    @staticmethod
    def unranked() -> 'RankSnapshot':
        return RankSnapshot()

    @staticmethod
    def parse(words: list[str]) -> 'RankSnapshot':
        # Accepts "gold 2 50", "Gold II 50" or "master 120"
        if len(words) not in (2, 3):
            raise ValueError(f"Expected a tier, a division and the LP, got {words}")

        tier = words[0].upper()
        if tier not in TIERS:
            raise ValueError(f"Unknown tier {words[0]}")

        league_points = int(words[-1])
        if league_points < 0:
            raise ValueError("The LP cannot be negative")

        if tier in APEX_TIERS:
            if len(words) != 2:
                raise ValueError(f"{tier} has no divisions")
            return RankSnapshot(tier=tier, league_points=league_points)

        if len(words) != 3:
            raise ValueError(f"{tier} needs a division")

        division = words[1].upper()
        if division.isdigit():
            division = DIVISION_NUMERALS.get(int(division), division)
        if division not in DIVISIONS:
            raise ValueError(f"Unknown division {words[1]}")

        return RankSnapshot(tier=tier, division=division, league_points=league_points)

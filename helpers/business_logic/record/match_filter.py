from datetime import datetime

from data.models.ranked_match import RankedMatch
from helpers.business_logic.exceptions import MalformedMatchDataError


def select_stream_matches(matches: list[RankedMatch], cutoff: datetime) -> list[RankedMatch]:
    # Keep only the matches that ended during the stream, in their original order
    return [match for match in matches if match.ended_at >= cutoff]


def calculate_record(matches: list[RankedMatch]) -> tuple[int, int]:
    wins = 0
    losses = 0

    for match in matches:
        if match.won is None:
            raise MalformedMatchDataError(match.match_id)

        if match.won:
            wins += 1
        else:
            losses += 1

    return wins, losses

from typing import Optional

from data.models.rank_snapshot import RankSnapshot
from helpers.business_logic.record.stream_record import StreamRecord, OfflineRecord

NO_GAMES_YET = "No ranked games this stream yet!"
OFFLINE_NO_DATA = "Stream is offline. No previous record found."


def format_rank_display(rank: RankSnapshot) -> str:
    if not rank.tier:
        return "Unranked"

    tier = rank.tier.capitalize()
    lp = f"{rank.league_points or 0}LP"

    # Master and above don't have divisions
    if rank.is_apex:
        return f"{tier} {lp}"

    return f"{tier} {rank.division} {lp}"


def format_lp_change(lp_change: Optional[int], approximate: bool = False) -> str:
    if lp_change is None:
        return "LP: N/A"

    text = f"LP: +{lp_change}" if lp_change >= 0 else f"LP: {lp_change}"
    if approximate:
        text += " (approx.)"

    return text


def format_win_loss(wins: int, losses: int) -> str:
    return f"{wins}W-{losses}L"


def format_stream_record(record: StreamRecord) -> str:
    if not record.has_games:
        return format_no_games_yet(record.rank)

    return f"[{format_rank_display(record.rank)}] Stream Record: {format_win_loss(record.wins, record.losses)} | {format_lp_change(record.lp_change, record.approximate)}"


def format_no_games_yet(rank: RankSnapshot) -> str:
    return f"[{format_rank_display(rank)}] {NO_GAMES_YET}"


def format_offline_record(record: Optional[OfflineRecord]) -> str:
    if not record:
        return OFFLINE_NO_DATA

    return f"Stream is offline. Last stream's record: {format_win_loss(record.wins, record.losses)} | {format_lp_change(record.lp_change, record.approximate)}"

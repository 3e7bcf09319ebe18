"""Tests for the Google Sheets tables, backed by an in-memory spreadsheet."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
import pytz

from data.models.captured_lp import CapturedLp
from data.models.game_type import GameType
from data.models.stream_session import StreamSession
from data.repositories.exceptions import StoreUnavailableError
from integrations.google.sheets.databases.stream_database import StreamDatabase

PLAYER = "Streamer#NA1"
STREAM_START = datetime(2026, 3, 1, 18, 0, tzinfo=timezone.utc)
TIMEZONE = pytz.timezone("America/New_York")

SESSION_HEADER = ["Game Type", "Player", "Stream Start", "Starting LP", "Starting LP Approximate", "Wins", "Losses", "LP Change"]
CAPTURE_HEADER = ["Player", "Stream Start", "LP", "Captured At (local time)"]


class FakeWorksheet:
    def __init__(self, rows: list[list[str]]) -> None:
        self.rows = [list(row) for row in rows]
        self.fail_writes = False

    def get_values(self, **kwargs) -> list[list[str]]:
        return [list(row) for row in self.rows]

    def append_rows(self, rows: list[list[str]], **kwargs) -> None:
        if self.fail_writes:
            raise ConnectionError("quota exceeded")
        self.rows.extend(list(row) for row in rows)

    def update_cells(self, cells, **kwargs) -> None:
        if self.fail_writes:
            raise ConnectionError("quota exceeded")
        for cell in cells:
            row = self.rows[cell.row - 1]
            row.extend([''] * (cell.col - len(row)))
            row[cell.col - 1] = cell.value


class FakeSpreadsheet:
    def __init__(self, worksheets: dict[str, FakeWorksheet]) -> None:
        self.worksheets = worksheets

    def worksheet(self, name: str) -> FakeWorksheet:
        return self.worksheets[name]


class FakeGoogleApi:
    def __init__(self, spreadsheet: FakeSpreadsheet) -> None:
        self.spreadsheet = spreadsheet

    def get_spreadsheet(self, key: str) -> FakeSpreadsheet:
        return self.spreadsheet


@pytest.fixture
def sheets() -> dict[str, FakeWorksheet]:
    return {
        "Sessions": FakeWorksheet([SESSION_HEADER]),
        "Captured LP": FakeWorksheet([CAPTURE_HEADER]),
    }


@pytest.fixture
def database(sheets: dict[str, FakeWorksheet]) -> StreamDatabase:
    return StreamDatabase(api=FakeGoogleApi(FakeSpreadsheet(sheets)), spreadsheet_key="key", timezone=TIMEZONE)


def test_new_session_is_appended_as_a_row(database: StreamDatabase, sheets: dict[str, FakeWorksheet]) -> None:
    session = StreamSession(GameType.LOL, STREAM_START, starting_lp=1450, lp_change=0)

    database.sessions.save(GameType.LOL, PLAYER, session)

    assert sheets["Sessions"].rows[1] == ["lol", PLAYER, "2026-03-01T13:00:00-05:00", "1450", "FALSE", "0", "0", "0"]
    assert database.sessions.get(GameType.LOL, PLAYER) == session


def test_existing_session_is_updated_in_place(database: StreamDatabase, sheets: dict[str, FakeWorksheet]) -> None:
    database.sessions.save(GameType.LOL, PLAYER, StreamSession(GameType.LOL, STREAM_START, starting_lp=1450, lp_change=0))

    updated = StreamSession(GameType.LOL, STREAM_START, starting_lp=1450, wins=2, losses=1, lp_change=15)
    database.sessions.save(GameType.LOL, PLAYER, updated)

    assert len(sheets["Sessions"].rows) == 2
    assert sheets["Sessions"].rows[1] == ["lol", PLAYER, "2026-03-01T13:00:00-05:00", "1450", "FALSE", "2", "1", "15"]
    assert database.sessions.get(GameType.LOL, PLAYER) == updated


def test_sessions_survive_a_refresh(database: StreamDatabase) -> None:
    session = StreamSession(GameType.LOL, STREAM_START, starting_lp=None, wins=1, lp_change=None, starting_lp_approximate=True)
    database.sessions.save(GameType.LOL, PLAYER, session)

    database.refresh()

    assert database.sessions.get(GameType.LOL, PLAYER) == session


def test_sessions_are_loaded_from_the_sheet() -> None:
    sheets = {
        "Sessions": FakeWorksheet([
            SESSION_HEADER,
            ["lol", PLAYER, "2026-03-01T13:00:00-05:00", "1450", "TRUE", "3", "1", ""],
            ["chess", "Someone#1", "2026-03-01T13:00:00-05:00", "1200", "FALSE", "1", "0", "8"],
            ["lol", "", "2026-03-01T13:00:00-05:00", "1200", "FALSE", "1", "0", "8"],
        ]),
        "Captured LP": FakeWorksheet([CAPTURE_HEADER]),
    }

    database = StreamDatabase(api=FakeGoogleApi(FakeSpreadsheet(sheets)), spreadsheet_key="key", timezone=TIMEZONE)

    assert database.sessions.get(GameType.LOL, PLAYER) == StreamSession(
        GameType.LOL, STREAM_START, starting_lp=1450, wins=3, losses=1, lp_change=None, starting_lp_approximate=True,
    )


def test_failed_writes_leave_the_cache_alone(database: StreamDatabase, sheets: dict[str, FakeWorksheet]) -> None:
    sheets["Sessions"].fail_writes = True

    with pytest.raises(StoreUnavailableError):
        database.sessions.save(GameType.LOL, PLAYER, StreamSession(GameType.LOL, STREAM_START, starting_lp=1450))

    assert database.sessions.get(GameType.LOL, PLAYER) is None


def test_failed_updates_leave_the_cache_alone(database: StreamDatabase, sheets: dict[str, FakeWorksheet]) -> None:
    original = StreamSession(GameType.LOL, STREAM_START, starting_lp=1450, lp_change=0)
    database.sessions.save(GameType.LOL, PLAYER, original)
    sheets["Sessions"].fail_writes = True

    with pytest.raises(StoreUnavailableError):
        database.sessions.save(GameType.LOL, PLAYER, original.copy(wins=1, lp_change=20))

    assert database.sessions.get(GameType.LOL, PLAYER) == original


def test_session_game_type_must_match(database: StreamDatabase) -> None:
    class OtherGame:
        value = "other"

    with pytest.raises(ValueError):
        database.sessions.save(OtherGame(), PLAYER, StreamSession(GameType.LOL, STREAM_START))


def test_captures_are_written_once(database: StreamDatabase, sheets: dict[str, FakeWorksheet]) -> None:
    captured_at = datetime(2026, 3, 1, 18, 2, tzinfo=timezone.utc)

    database.captured_lp.save(CapturedLp(PLAYER, STREAM_START, 1450, captured_at))
    database.captured_lp.save(CapturedLp(PLAYER, STREAM_START, 1490, captured_at))

    assert sheets["Captured LP"].rows[1:] == [[PLAYER, "2026-03-01T13:00:00-05:00", "1450", "2026-03-01T13:02:00-05:00"]]
    assert database.captured_lp.get(PLAYER, STREAM_START).lp == 1450


def test_captures_match_the_same_instant_in_any_timezone(database: StreamDatabase) -> None:
    database.captured_lp.save(CapturedLp(PLAYER, STREAM_START, 1450))
    database.refresh()

    assert database.captured_lp.get(PLAYER, STREAM_START.astimezone(TIMEZONE)).lp == 1450
    assert database.captured_lp.get(PLAYER, datetime(2026, 3, 2, 18, 0, tzinfo=timezone.utc)) is None


def test_update_of_a_row_deleted_by_hand_fails(database: StreamDatabase, sheets: dict[str, FakeWorksheet]) -> None:
    original = StreamSession(GameType.LOL, STREAM_START, starting_lp=1450, lp_change=0)
    database.sessions.save(GameType.LOL, PLAYER, original)
    sheets["Sessions"].rows[1] = ["lol", "Someone#1", "2026-03-01T13:00:00-05:00", "1200", "FALSE", "0", "0", "0"]

    with pytest.raises(StoreUnavailableError):
        database.sessions.save(GameType.LOL, PLAYER, original.copy(wins=1, lp_change=20))

    assert database.sessions.get(GameType.LOL, PLAYER) == original

    # Once the refresh drops the row from the cache, the next save writes it again
    database.refresh()
    assert database.sessions.get(GameType.LOL, PLAYER) is None

    updated = original.copy(wins=1, lp_change=20)
    database.sessions.save(GameType.LOL, PLAYER, updated)

    assert sheets["Sessions"].rows[2] == ["lol", PLAYER, "2026-03-01T13:00:00-05:00", "1450", "FALSE", "1", "0", "20"]
    assert database.sessions.get(GameType.LOL, PLAYER) == updated

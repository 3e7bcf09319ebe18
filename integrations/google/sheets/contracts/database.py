import logging
import pytz
from datetime import datetime
from typing import Optional

from reactivex import Observable
from reactivex.subject import Subject

import gspread

from integrations.google.api import GoogleApi

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, api: GoogleApi, spreadsheet_key: str, timezone: pytz.timezone):
        self._api = api
        self._spreadsheet_key = spreadsheet_key
        self.timezone = timezone

        self._spreadsheet = Subject()

    @property
    def spreadsheet(self) -> Observable:
        return self._spreadsheet

    def refresh(self) -> None:
        logger.info('Refreshing Google Sheets data')
        try:
            self._spreadsheet.on_next(self.load())
        except Exception as e:
            # Keep serving the cached data; an on_error would end the stream for good
            logger.exception(e)

    async def refresh_job(self, context) -> None:
        self.refresh()

    def load(self) -> gspread.Spreadsheet:
        logger.info(f"Loading spreadsheet {self._spreadsheet_key}")
        return self._api.get_spreadsheet(self._spreadsheet_key)

    def from_datetime_string(self, datetime_string: str) -> Optional[datetime]:
        try:
            parsed = datetime.fromisoformat(datetime_string.strip())
        except ValueError:
            return None

        return parsed if parsed.tzinfo else self.timezone.localize(parsed)

    def to_datetime_string(self, datetime_object: Optional[datetime]) -> str:
        if not datetime_object:
            return ''

        localized_datetime = datetime_object.astimezone(self.timezone) if datetime_object.tzinfo else self.timezone.localize(datetime_object)

        # Seconds are enough - stream start times never carry more precision than that
        return localized_datetime.isoformat(timespec='seconds')

import json
import logging

import gspread

logger = logging.getLogger(__name__)


class GoogleApi:
    def __init__(self, credentials: str):
        # The credentials can be the service account JSON itself or a path to the JSON file
        if credentials.strip().startswith('{'):
            self._client = gspread.service_account_from_dict(json.loads(credentials))
        else:
            self._client = gspread.service_account(filename=credentials)

    def get_spreadsheet(self, key: str) -> gspread.Spreadsheet:
        return self._client.open_by_key(key)

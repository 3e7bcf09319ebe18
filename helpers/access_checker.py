class AccessChecker:
    def __init__(self, masters: set[str]):
        self._masters = masters

    def is_master(self, username: str) -> bool:
        return bool(username) and username in self._masters

    @staticmethod
    def parse_usernames(raw: str) -> set[str]:
        return {username.strip().lstrip('@') for username in (raw or '').split(',') if username.strip()}

# Base class for failures coming from the ranking or streaming APIs
class RankingApiError(Exception):
    pass


# The Riot ID doesn't belong to any account
class AccountNotFoundError(RankingApiError):
    def __init__(self, riot_id: str, *args):
        super().__init__(f"No account was found for {riot_id}", *args)
        self.riot_id = riot_id


# The API could not be reached or answered with an unexpected status
class UpstreamUnavailableError(RankingApiError):
    pass

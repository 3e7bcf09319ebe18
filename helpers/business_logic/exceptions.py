# Raised when a match can't be classified as a win or a loss
class MalformedMatchDataError(Exception):
    def __init__(self, match_id: str, *args):
        super().__init__(f"Could not determine the outcome of match {match_id}", *args)
        self.match_id = match_id

# Raised when the session storage can't be read from or written to
# When this happens during a reconciliation, nothing has been committed
class StoreUnavailableError(Exception):
    pass

"""Exception classes raised by the stateful services."""


class FinanceTrackerError(Exception):
    """Base class for finance tracker errors."""


class NotAuthenticatedError(FinanceTrackerError):
    def __init__(self, action: str = "This operation"):
        super().__init__(f"{action} requires a signed-in user")


class UnknownCollectionError(FinanceTrackerError, ValueError):
    def __init__(self, name: str):
        super().__init__(f"Unknown record collection: {name!r}")
        self.name = name

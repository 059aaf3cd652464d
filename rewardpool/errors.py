class RewardPoolError(Exception):
    pass


class InvalidStateError(RewardPoolError):
    """Raised when a query cannot be answered from the current pool state,
    e.g. an ROI for a subscriber who paid nothing."""


class DuplicateSubscriberError(RewardPoolError, ValueError):
    def __init__(self, address: str):
        super().__init__(f"Subscriber {address!r} has already been admitted")
        self.address = address


class SimulationLimitError(RewardPoolError):
    pass

class RegistrationError(Exception):
    """Base class for failures in the registration pipeline."""


class IssuanceExhausted(RegistrationError):
    pass


class PrimeSamplingExhausted(IssuanceExhausted):
    pass


class PairSpaceExhausted(IssuanceExhausted):
    pass


class StoreError(RegistrationError):
    pass


class StoreReadError(StoreError):
    pass


class StoreWriteError(StoreError):
    pass


class PairConflict(StoreError):
    """Another writer already recorded one of the pairs in this batch."""

    def __init__(self, message, pair_keys=()):
        super().__init__(message)
        self.pair_keys = tuple(pair_keys)


class NotificationError(RegistrationError):
    pass


class InvalidProofImage(RegistrationError):
    pass

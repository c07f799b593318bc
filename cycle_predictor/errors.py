"""Error taxonomy shared by the scheduler, scoring pipeline and ledger."""


class CyclePredictorError(Exception):
    """Base class for all cycle predictor errors."""


class TransientReadError(CyclePredictorError):
    """Countdown or draw source unreachable, timed out or returned garbage.

    Counted by the state machine; never fatal.
    """


class InvalidCountdownValue(TransientReadError):
    """Countdown reading outside the cycle's valid range."""


class InsufficientHistory(CyclePredictorError):
    """Not enough prior draws to build features for a slot."""


class ScorerError(CyclePredictorError):
    """A scorer in the ensemble failed or returned an unusable probability."""


class PersistenceError(CyclePredictorError):
    """Ledger or record store write failed."""

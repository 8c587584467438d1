"""Typed errors raised by the blackjack engine."""


class BlackjackError(Exception):
    """Base class for all engine errors."""


class WrongPhaseError(BlackjackError):
    """An operation was invoked outside the phase it belongs to."""

    def __init__(self, operation: str, phase: object) -> None:
        self.operation = operation
        self.phase = phase
        super().__init__(f"Cannot {operation} during {phase}")


class InsufficientFundsError(BlackjackError):
    """A wager exceeds the player's current balance."""

    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        super().__init__(f"Insufficient funds: need {required}, have {available}")


class IllegalActionError(BlackjackError):
    """A player action was attempted while it is not offered."""

    def __init__(self, action: object) -> None:
        self.action = action
        super().__init__(f"Action not allowed: {action}")


class EmptyShoeError(BlackjackError):
    """A card was requested from an exhausted shoe."""

    def __init__(self) -> None:
        super().__init__("Cannot deal from an empty shoe")


class InvalidBetError(BlackjackError, ValueError):
    """A bet is non-positive or outside the table limits."""


class StoreError(BlackjackError):
    """A persistence backend failed."""

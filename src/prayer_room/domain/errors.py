"""Error types shared by the prayer room workflows."""


class PrayerRoomError(Exception):
    """Base class for prayer room errors."""


class ValidationError(PrayerRoomError):
    """A required field is missing; no store call was made."""


class StoreError(PrayerRoomError):
    """The record store failed to select, insert or update."""


class InvalidTransitionError(PrayerRoomError):
    """An action was invoked in a state that does not offer it."""

    def __init__(self, action: str, state: str) -> None:
        super().__init__(f"Cannot {action} while {state}")
        self.action = action
        self.state = state

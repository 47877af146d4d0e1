import logging

logger = logging.getLogger(__name__)


class ConfirmationGate:
    """Single slot holding the destructive action awaiting a yes/no answer.

    A second request made before the first is resolved replaces it; the
    latest request wins.
    """

    def __init__(self):
        self._pending = None

    @property
    def pending(self):
        return self._pending

    def request(self, action):
        if self._pending is not None and self._pending != action:
            logger.warning(
                "Replacing unresolved confirmation %s with %s", self._pending, action
            )
        self._pending = action
        logger.debug("Confirmation requested: %s", action)
        return action

    def resolve(self, accepted):
        """Clear the slot and return the action if it was accepted."""
        action, self._pending = self._pending, None
        if action is None:
            logger.debug("Confirmation resolved with nothing pending")
            return None
        logger.debug("Confirmation %s for %s", "accepted" if accepted else "cancelled", action)
        return action if accepted else None

    def cancel(self):
        self.resolve(False)

# finance_client/suggestions/suppression.py


class SuppressionState:
    """Set once the user dismisses a suggestion; lives for one edit session."""

    def __init__(self) -> None:
        self.suppressed = False

    def suppress(self) -> None:
        self.suppressed = True

    def reset(self) -> None:
        self.suppressed = False

    def __bool__(self) -> bool:
        return self.suppressed

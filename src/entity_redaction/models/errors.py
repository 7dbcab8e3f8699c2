"""
Error types raised to callers of the filtering and markup stages.
"""


class InvalidInputError(TypeError):
    """Raised when a stage that slices text receives a non-string argument."""

    def __init__(self, argument: str, value: object) -> None:
        self.argument = argument
        self.received_type = type(value).__name__
        super().__init__(
            f"'{argument}' must be a str, got {self.received_type}"
        )

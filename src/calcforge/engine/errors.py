"""Base exception shared by every stage of the expression engine."""


class EngineError(Exception):
    """Error raised by the lexer, parser or evaluator.

    Attributes:
        message: Human-readable description without location info
        position: Character offset into the source, or None when the
            error is not tied to a location (evaluation errors)
    """

    def __init__(self, message: str, position: int | None = None):
        self.message = message
        self.position = position
        if position is None:
            super().__init__(message)
        else:
            super().__init__(f"{message} at position {position}")

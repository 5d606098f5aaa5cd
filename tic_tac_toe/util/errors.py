class GameError(Exception):
    pass


class LogicError(GameError):
    pass


class InvalidMoveError(GameError):
    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason

"""Error conditions raised by the rules and search engines."""


class EngineError(ValueError):
    pass


class IllegalMove(EngineError):
    def __init__(self, position, reason: str):
        self.position = position
        self.reason = reason
        super().__init__(f"Illegal move at {tuple(position)}: {reason}")


class NoLegalMoves(EngineError):
    def __init__(self, state):
        self.state = state
        super().__init__(f"No legal moves available (status={state.status.name})")

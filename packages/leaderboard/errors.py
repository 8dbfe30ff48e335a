class LeaderboardError(Exception):
    """Base class for cycle-level leaderboard failures."""


class LoadError(LeaderboardError):
    """The persisted document exists but could not be read or parsed."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"Could not load {source}: {reason}")
        self.source = source
        self.reason = reason


class WriteError(LeaderboardError):
    """The recomputed document could not be persisted."""

    def __init__(self, target: str, reason: str):
        super().__init__(f"Could not write {target}: {reason}")
        self.target = target
        self.reason = reason


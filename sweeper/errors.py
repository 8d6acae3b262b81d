"""Errors raised by the game core."""


class SweeperError(Exception):
    """Base class for every error the game core raises."""


class ConfigurationError(SweeperError, ValueError):
    """The board configuration cannot host a playable round."""


class InvalidIndexError(SweeperError, IndexError):
    """A command referenced a cell outside the board."""

    def __init__(self, index: int, cell_count: int):
        super().__init__(f"Cell index {index} is outside the board (0..{cell_count - 1})")
        self.index = index
        self.cell_count = cell_count

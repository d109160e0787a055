"""
Players module exceptions.
"""

from shared.exceptions import NotFoundError


class PlayerNotFoundError(NotFoundError):
    def __init__(self, player_id: str):
        super().__init__(
            f"Player not found: {player_id}",
            code="PLAYER_NOT_FOUND",
            details={"player_id": player_id},
        )

"""
Server configuration and game timing constants.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class GameConfig:
    """Configuration for room server and night-cycle parameters."""

    # Night cycle timing (seconds)
    night_duration: float = 30  # action-collection window
    discussion_duration: float = 20  # open discussion after resolution
    timer_interval: float = 1  # game-timer broadcast period

    # Game settings
    min_players: int = 5
    host_joins_as_player: bool = False  # create-room also joins the host when a username is given
    random_seed: Optional[int] = None  # Seed for role assignment and fallback kills

    # Server settings
    host: str = "127.0.0.1"
    port: int = 3001
    cors_allowed_origins: str = "*"  # comma-separated list or "*"
    async_mode: str = "threading"
    log_level: str = "INFO"

    def allowed_origins(self):
        """Origins in the form Flask-SocketIO expects."""
        if self.cors_allowed_origins.strip() == "*":
            return "*"
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]


# Default configuration instance
default_config = GameConfig()

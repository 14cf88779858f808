"""Runtime configuration for the stash finder."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from stash_finder.models import ALL_STRUCTURE_TYPES, NotificationChannel, StructureType, ThresholdConfig


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="STASH_FINDER_", env_file=".env", extra="ignore")

    app_name: str = "stash-finder"
    log_level: str = "INFO"
    storage_blocks: list[StructureType] = Field(
        default_factory=lambda: sorted(ALL_STRUCTURE_TYPES, key=lambda kind: kind.value),
        description="Storage block kinds to count in each chunk.",
    )
    minimum_storage_count: int = Field(
        default=4,
        ge=1,
        description="Minimum number of storage blocks in a chunk to record it.",
    )
    minimum_distance: int = Field(
        default=0,
        ge=0,
        description="Minimum distance (in chunks) from spawn before a chunk is recorded.",
    )
    notifications: bool = True
    notification_mode: NotificationChannel = NotificationChannel.BOTH
    state_file: str = Field(default="stash-finder.json", description="Where the stash registry is persisted.")
    game_adapter: str = Field(default="echo", description="Notification backend: echo/minescript.")
    minescript_command_prefix: str = "/"

    def threshold_config(self) -> ThresholdConfig:
        return ThresholdConfig(
            match_types=frozenset(self.storage_blocks),
            minimum_count=self.minimum_storage_count,
            minimum_distance=self.minimum_distance,
            notify=self.notifications,
            notify_channel=self.notification_mode,
        )


settings = Settings()

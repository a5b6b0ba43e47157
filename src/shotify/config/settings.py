import os
from pathlib import Path
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, read once from SHOTIFY_* environment variables."""
    database_url: str
    log_dir: Path
    public_url: str
    stats_batch_size: int

    @classmethod
    def from_env(cls) -> 'Settings':
        return cls(
            database_url=os.getenv("SHOTIFY_DATABASE_URL", "sqlite:///shotify.db"),
            log_dir=Path(os.getenv("SHOTIFY_LOG_DIR", "logs")),
            public_url=os.getenv("SHOTIFY_PUBLIC_URL", "https://shotify.org").rstrip("/"),
            stats_batch_size=int(os.getenv("SHOTIFY_STATS_BATCH_SIZE", "100")),
        )

    def ensure_directories_exist(self) -> None:
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def share_url(self, share_id: str) -> str:
        return f"{self.public_url}/shared/{share_id}"


settings = Settings.from_env()

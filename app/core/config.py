from typing import Optional
from uuid import UUID

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import computed_field

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # App
    app_name: str = "feedtree"
    debug: bool = False
    log_level: str = "INFO"

    # DB settings (sqlite file when db_host is unset)
    db_user: str = ""
    db_pass: str = ""
    db_host: str = ""
    db_port: int = 5432
    db_name: str = "feedtree"
    sqlite_path: str = "./feedtree.db"

    # Redis (host item/data caches)
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl_seconds: int = 120

    # YouTube feed
    youtube_developer_key: str = ""
    youtube_max_results: int = 25
    youtube_safe_search: str = "strict"
    youtube_timeout_seconds: float = 10.0

    # Virtual tree provider
    root_template_id: Optional[UUID] = None
    resource_template_id: Optional[UUID] = None
    video_owner_field: str = "Owner"
    content_database: str = "master"
    id_namespace: str = "YouTubeDataProvider"

    @computed_field
    @property
    def database_url(self) -> str:
        if not self.db_host:
            return f"sqlite+aiosqlite:///{self.sqlite_path}"
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_pass}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

settings = Settings()

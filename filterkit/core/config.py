from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    APP_ENV: str = "local"
    APP_NAME: str = "filterkit"

    DATABASE_URL: str = "sqlite+pysqlite:///:memory:"
    DATABASE_ECHO: bool = False

    DEFAULT_PAGE_SIZE: int = 15
    DEFAULT_SORT_FIELD: str = "created_at"
    DEFAULT_SORT_DIR: str = "desc"  # asc | desc
    SOFT_DELETE_COLUMN: str = "deleted"

settings = Settings()

from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    app_name: str = "helloRun"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"
    app_url: str = ""

    # Database settings
    database_url: str

    # Session settings
    secret_key: str
    session_cookie: str = "hellorun_session"
    session_max_age: int = 60 * 60 * 24 * 7

    # CORS settings
    allowed_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Blog cover storage
    upload_dir: str = "uploads"
    upload_base_url: str = "http://localhost:8000/uploads"
    blog_cover_max_size: int = 5 * 1024 * 1024
    blog_cover_allowed_types: list[str] = ["image/jpeg", "image/png", "image/webp"]

    # Blog moderation
    slug_max_attempts: int = 10000
    blog_revision_history_limit: int = 25
    blog_public_list_limit: int = 12
    blog_view_window_hours: int = 24

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()

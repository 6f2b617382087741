"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    database_url: str

    # Redis (listing cache + admin sessions); empty disables the cache
    redis_url: str = ""
    list_cache_ttl_seconds: int = 300

    # App
    log_level: str = "INFO"
    environment: str = "development"
    site_name: str = "Our Company"
    public_base_url: str = "http://localhost:8000"

    # Object storage
    storage_backend: str = "local"  # local | s3
    media_root: str = "media"
    storage_bucket: str = "images"
    s3_endpoint_url: str = ""
    s3_region: str = "us-east-1"
    s3_access_key_id: str = ""
    s3_secret_access_key: str = ""
    storage_public_base_url: str = ""  # e.g. "https://cdn.example.com/images"

    # Admin panel
    admin_password: str = ""  # empty = admin panel is open

    # Owner notifications about new contact submissions
    notify_telegram_bot_token: str = ""
    notify_telegram_chat_id: str = ""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()  # type: ignore[call-arg]

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 8000

    upload_dir: str = "./uploads"
    max_upload_size_mb: int = 20
    allowed_extensions: list[str] = [".jpg", ".jpeg", ".png", ".webp", ".gif", ".psd"]

    vision_provider: str = "rekognition"
    aws_default_region: str = "us-east-1"
    rekognition_max_labels: int = 20
    rekognition_min_confidence: float = 80.0
    vision_timeout_seconds: int = 10

    max_workers: int = 4

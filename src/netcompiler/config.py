from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "NC_"}

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Security - API Key
    api_key: str = ""

    # Artifacts
    artifact_root: str = "artifacts"
    model_root: str = "models"
    model_artifact: str = "model.py"
    trainer_artifact: str = "train.py"

    # Training process
    python_executable: str = "python"
    train_timeout_seconds: int = 3600

    # Generated fit() call
    monitor_root: str = "http://localhost:9000"
    monitor_path: str = "/publish/epoch/end/"
    validation_split: float = 0.2

    # Graph ordering: drop, warn or error
    unreachable_policy: str = "warn"

    # Remote trainer
    trainer_url: str = ""
    trainer_timeout_seconds: float = 10.0

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"


settings = Settings()

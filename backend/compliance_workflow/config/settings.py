"""Engine Settings - Central Configuration"""
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Workflow engine defaults (explicit engine options override these)
    workflow_auto_evaluate: bool = True
    workflow_max_auto_transitions: int = 10
    workflow_debug: bool = False

    # Logging - empty logs_path means console only
    logs_path: str = ""
    log_level: str = "INFO"

    # Environment
    environment: str = "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Banco de dados
    DATABASE_URL: str = "sqlite:///./barbearia.db"

    # Aplicação
    ENVIRONMENT: str = "development"
    DEBUG: bool = False  # liga o echo do SQL
    LOG_LEVEL: str = "INFO"
    FRONTEND_URL: str = "http://localhost:3001"

    # cria barbeiro/cliente/serviços de exemplo no startup
    SEED_DEMO_DATA: bool = False

    @property
    def expose_error_details(self) -> bool:
        return self.ENVIRONMENT == "development"


@lru_cache()
def get_settings() -> Settings:
    return Settings()

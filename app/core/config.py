from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./database.sqlite"
    SQL_ECHO: bool = False
    LOG_LEVEL: str = "INFO"

    # How many statements get_schema returns as sample rows
    SCHEMA_SAMPLE_ROWS: int = 5
    MAX_PAGE_SIZE: int = 100

    # This tells Pydantic to read from the .env file
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


# Create a single instance of the settings to use everywhere
settings = Settings()

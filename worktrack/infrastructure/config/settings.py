"""Application settings"""
from pydantic_settings import BaseSettings
from typing import Optional, List


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Worktrack API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # API
    API_V1_PREFIX: str = "/api/v1"
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:3000", "http://127.0.0.1:5173"]

    # Database
    DATABASE_URL: Optional[str] = None
    DATABASE_TYPE: str = "postgresql"  # sqlite, postgresql
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "worktrack"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    SQLITE_PATH: str = "./worktrack.db"

    # Work items
    DEPENDENCY_TREE_MAX_DEPTH: int = 10
    SUBTASK_TREE_MAX_DEPTH: int = 10
    DUE_SOON_DAYS: int = 2

    class Config:
        env_file = ".env"
        case_sensitive = True

    def get_database_url(self) -> str:
        """Get database URL from settings or environment"""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        if self.DATABASE_TYPE == "postgresql":
            return f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        elif self.DATABASE_TYPE == "sqlite":
            return f"sqlite:///{self.SQLITE_PATH}"
        else:
            raise ValueError(f"Unsupported database type: {self.DATABASE_TYPE}")


settings = Settings()

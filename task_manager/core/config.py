import os
from dotenv import load_dotenv

load_dotenv()

STORAGE_MODES = ("database", "memory")


class Settings:
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Task Manager API")
    VERSION: str = "1.0.0"

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    PORT: int = int(os.getenv("PORT", "3000"))

    # "database" = owned tasks behind JWT auth, "memory" = ownerless in-process list
    STORAGE_MODE: str = os.getenv("STORAGE_MODE", "database")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./tasks.db")

    JWT_SECRET: str = os.getenv("JWT_SECRET", "change-this-secret")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS: list[str] = [
        o.strip()
        for o in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
        if o.strip()
    ]

    def __init__(self, **overrides):
        for key, value in overrides.items():
            if not hasattr(self, key):
                raise AttributeError(f"Unknown setting: {key}")
            setattr(self, key, value)

        if self.STORAGE_MODE not in STORAGE_MODES:
            raise ValueError(
                f"STORAGE_MODE must be one of {STORAGE_MODES}, got {self.STORAGE_MODE!r}"
            )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def auth_enabled(self) -> bool:
        return self.STORAGE_MODE == "database"


settings = Settings()

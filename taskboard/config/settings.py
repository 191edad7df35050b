# taskboard/config/settings.py
# Runtime settings read from the environment (.env supported)

import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_SESSION_SECRET = "taskboard-demo-secret-change-in-production"


class Settings:
    """Application settings"""

    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Database location
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/taskboard.sqlite")

    # Session signing
    SESSION_SECRET = os.getenv("SESSION_SECRET", DEFAULT_SESSION_SECRET)
    SESSION_ALGORITHM = os.getenv("SESSION_ALGORITHM", "HS256")

    # Server
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "3000"))
    RELOAD = os.getenv("RELOAD", "false").lower() == "true"

    @classmethod
    def is_production(cls) -> bool:
        return cls.ENVIRONMENT.lower() == "production"

    @classmethod
    def uses_default_secret(cls) -> bool:
        return cls.SESSION_SECRET == DEFAULT_SESSION_SECRET


settings = Settings()

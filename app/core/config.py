from pydantic_settings import BaseSettings
from typing import Optional, List

class Settings(BaseSettings):
    PROJECT_NAME: str = "School Directory"
    VERSION: str = "1.0.0"

    # School backend
    BACKEND_URL: str = "http://localhost:5000"
    REQUEST_TIMEOUT: float = 10.0

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://127.0.0.1:3000",
    ]

    DEFAULT_PAGE_SIZE: int = 10

    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    def __init__(self, **data):
        super().__init__(**data)
        self.BACKEND_URL = self.BACKEND_URL.rstrip("/")

    class Config:
        env_file = ".env"

settings = Settings()

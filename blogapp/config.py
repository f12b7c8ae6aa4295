from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # API
    API_TITLE: str = "Blog API"
    API_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Firebase Admin
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None
    FIREBASE_CLIENT_EMAIL: Optional[str] = None
    FIREBASE_PRIVATE_KEY: Optional[str] = None

    # Identity Toolkit REST (password sign-in, custom token exchange)
    FIREBASE_API_KEY: Optional[str] = None
    IDENTITY_TOOLKIT_URL: str = "https://identitytoolkit.googleapis.com/v1"

    # Session cookie
    SESSION_COOKIE_NAME: str = "session"
    SESSION_EXPIRES_DAYS: int = 5

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True


# Create settings instance
settings = Settings()

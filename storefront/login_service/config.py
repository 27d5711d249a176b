"""
Configuration settings for Login Service
"""
from storefront.config import CommonSettings


class Settings(CommonSettings):
    """Application settings"""
    
    # Service
    SERVICE_NAME: str = "login-service"
    SERVICE_PORT: int = 3001
    
    # Tokens
    JWT_SECRET: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    SESSION_TTL_HOURS: int = 24
    
    # Passwords
    BCRYPT_ROUNDS: int = 12
    MIN_PASSWORD_LENGTH: int = 6


# Create global settings instance
settings = Settings()

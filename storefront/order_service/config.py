"""
Configuration settings for Order Service
"""
from storefront.config import CommonSettings


class Settings(CommonSettings):
    """Application settings"""
    
    # Service
    SERVICE_NAME: str = "order-service"
    SERVICE_PORT: int = 3002


# Create global settings instance
settings = Settings()

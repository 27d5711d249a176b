"""
Configuration settings for Product Service
"""
from storefront.config import CommonSettings


class Settings(CommonSettings):
    """Application settings"""
    
    # Service
    SERVICE_NAME: str = "product-service"
    SERVICE_PORT: int = 3000
    
    # Redis (empty URL disables the listing cache)
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_SOCKET_TIMEOUT: float = 1.0
    
    # Listing cache
    PRODUCTS_CACHE_KEY: str = "products:all"
    PRODUCTS_CACHE_TTL: int = 300


# Create global settings instance
settings = Settings()

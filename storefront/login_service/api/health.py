"""
Health check endpoint
"""
from storefront.health import create_health_router
from storefront.login_service.config import settings

router = create_health_router(settings.SERVICE_NAME)

"""
Storefront microservices: login, product and order services over one database
"""

__version__ = "1.0.0"

"""
Product service: catalogue CRUD with a cached listing
"""

"""
Login service: registration, sessions and user accounts
"""

"""
API v1 Module
Contains all version 1 API endpoints.
"""

# Expose routers for easy import
from app.api.v1 import activity_logs, auth, mail, requests, users

__all__ = ["activity_logs", "auth", "mail", "requests", "users"]

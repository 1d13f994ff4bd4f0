"""
Security Configuration for Guitar Repair API
Centralizes CORS and Trusted Host settings
"""

from api.config import config

# CORS Configuration
ALLOWED_ORIGINS = [
    "https://repair-desk.example.com",
]

# Trusted Host Configuration
ALLOWED_HOSTS = [
    "repair-desk.example.com",
    "localhost",
    "127.0.0.1",
]

# Response Headers to Expose
EXPOSE_HEADERS = ["X-Trace-Id", "X-Process-Time", "Content-Range", "Accept-Ranges"]


def get_allowed_origins() -> list[str]:
    """Get allowed origins based on environment"""
    if config.is_production():
        return ALLOWED_ORIGINS
    else:
        return ["http://localhost:3000", "http://localhost:8000", "http://127.0.0.1:3000"]


def get_allowed_hosts() -> list[str]:
    """Get allowed hosts based on environment"""
    if config.is_production():
        return ALLOWED_HOSTS
    else:
        return ["localhost", "127.0.0.1", "testserver"]

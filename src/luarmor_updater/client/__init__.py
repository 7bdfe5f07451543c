"""Luarmor API client."""

from .client import LuarmorClient, api_message, check_response, read_script
from .models import KeyDetails, Project, Script
from .ratelimit import RateLimiter

__all__ = [
    "LuarmorClient",
    "api_message",
    "read_script",
    "check_response",
    "KeyDetails",
    "Project",
    "RateLimiter",
    "Script",
]

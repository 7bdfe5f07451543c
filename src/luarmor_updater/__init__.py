"""Upload a script to Luarmor from CI and confirm the new version."""

__version__ = "0.1.0"

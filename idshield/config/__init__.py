"""Configuration module for the idshield service."""
from .settings import AppConfig, load_settings

__all__ = ["AppConfig", "load_settings"]

"""
Utility modules for the storefront server
"""
from .config_loader import Settings, load_settings

__all__ = [
    'Settings',
    'load_settings',
]

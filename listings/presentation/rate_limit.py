"""Shared slowapi limiter; attached to the app in main.py"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from listings.infrastructure.config.settings import get_settings

limiter = Limiter(key_func=get_remote_address)


def login_limit() -> str:
    return get_settings().login_rate_limit

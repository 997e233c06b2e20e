"""Shared ``slowapi`` limiter (keyed on client address)."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from reliefnet.config import settings

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])

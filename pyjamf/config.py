"""
Process-wide settings, read from the environment.

A `.env` file in the working directory (or the one given to
`Settings.from_env`) is loaded first, so these can be kept next to a project:

    JAMF_DATE_FORMAT=%Y-%m-%d %H:%M:%S
    JAMF_STRICT_DATES=false
    JAMF_CACHE_DEFINITIONS=true
"""

import os
from typing import Optional

import attr
import dotenv

from pyjamf import validate


# The format the Classic API uses for date values, e.g. in extension attributes.
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


@attr.s(auto_attribs=True, frozen=True, kw_only=True)
class Settings:
    date_format: str = DEFAULT_DATE_FORMAT

    # If a date coming from the server cannot be parsed, keep the raw value
    # (the default), or raise.
    strict_dates: bool = attr.ib(default=False, converter=validate.boolean)

    cache_definitions: bool = attr.ib(default=True, converter=validate.boolean)

    @classmethod
    def from_env(cls, dotenv_path=None, environ=None):
        if environ is None:
            dotenv.load_dotenv(dotenv_path)
            environ = os.environ

        kwargs = {}
        if environ.get('JAMF_DATE_FORMAT'):
            kwargs['date_format'] = environ['JAMF_DATE_FORMAT']
        if environ.get('JAMF_STRICT_DATES'):
            kwargs['strict_dates'] = environ['JAMF_STRICT_DATES']
        if environ.get('JAMF_CACHE_DEFINITIONS'):
            kwargs['cache_definitions'] = environ['JAMF_CACHE_DEFINITIONS']
        return cls(**kwargs)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def configure(settings: Optional[Settings] = None, **kwargs) -> Settings:
    """Replace the process-wide settings.

    Either pass a complete `Settings`, or keyword arguments to change
    individual values of the current ones.
    """
    global _settings
    if settings is None:
        settings = attr.evolve(get_settings(), **kwargs)
    _settings = settings
    return settings

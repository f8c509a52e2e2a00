"""
Base configuration for the solution graph service settings classes.

Every settings class reads the process environment and an optional ``.env``
file. Names match case-sensitively and unknown keys are ignored.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict

HTTP_SCHEMES = ('http://', 'https://')


def normalize_base_url(value: str) -> str:
    """Strip whitespace and trailing slashes; reject anything that is not http(s)."""
    value = (value or '').strip()
    if not value.startswith(HTTP_SCHEMES):
        raise ValueError('URL must start with http:// or https://')
    return value.rstrip('/')


class BaseConfig(BaseSettings):
    """
    Settings base shared by GitHub access and application settings.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra='ignore'
    )

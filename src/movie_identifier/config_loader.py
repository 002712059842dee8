"""
Configuration loader with validation.

Builds MovieIdentifierConfig from environment variables (and a local .env file).
"""
from dotenv import load_dotenv

from .config import MovieIdentifierConfig
from .config_validator import (
    get_bool_env,
    get_number_env,
    get_optional_env,
    get_required_env,
    validate_api_key,
)
from .exceptions import ConfigurationError


def load_config_from_env(use_dotenv: bool = True) -> MovieIdentifierConfig:
    """
    Load configuration from environment variables with validation.
    
    Usage:
        config = load_config_from_env()
        app = MovieIdentifierApp(config)
        app.initialize()
    
    :param use_dotenv: Load a .env file first (local development)
    :return: Validated MovieIdentifierConfig instance
    :raises: ConfigurationError if required configs are missing or invalid
    """
    if use_dotenv:
        load_dotenv()
    
    defaults = MovieIdentifierConfig()
    api_key = get_required_env(
        "GEMINI_API_KEY",
        description="Gemini API key (get from https://aistudio.google.com/app/apikey)"
    )
    
    config = MovieIdentifierConfig(
        api_key=validate_api_key(api_key, "GEMINI_API_KEY"),
        model=get_optional_env("GEMINI_MODEL", default=defaults.model),
        base_url=get_optional_env("GEMINI_BASE_URL", default=defaults.base_url),
        request_timeout_seconds=get_number_env(
            "REQUEST_TIMEOUT_SECONDS", defaults.request_timeout_seconds
        ),
        retry_max_attempts=get_number_env(
            "RETRY_MAX_ATTEMPTS", defaults.retry_max_attempts, cast=int
        ),
        retry_base_delay_seconds=get_number_env(
            "RETRY_BASE_DELAY_SECONDS", defaults.retry_base_delay_seconds
        ),
        retry_rejected_requests=get_bool_env(
            "RETRY_REJECTED_REQUESTS", defaults.retry_rejected_requests
        ),
        max_upload_bytes=get_number_env(
            "MAX_UPLOAD_BYTES", defaults.max_upload_bytes, cast=int
        ),
        max_sessions=get_number_env("MAX_SESSIONS", defaults.max_sessions, cast=int),
    )
    
    if config.retry_max_attempts < 1:
        raise ConfigurationError("RETRY_MAX_ATTEMPTS must be at least 1.")
    if config.retry_base_delay_seconds < 0:
        raise ConfigurationError("RETRY_BASE_DELAY_SECONDS must not be negative.")
    if config.max_sessions < 1:
        raise ConfigurationError("MAX_SESSIONS must be at least 1.")
    
    return config


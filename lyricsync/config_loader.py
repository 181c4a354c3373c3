"""Handles loading configuration from YAML files."""

import yaml
import os
import logging
from typing import Optional

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.yaml"

DEFAULT_CONFIG = {
    "target_language": "Turkish",
    "default_language_code": "tr",
    "cache_ttl_seconds": 24 * 60 * 60,
    "poll_interval_seconds": 0.5,
    "lrclib_base_url": "https://lrclib.net",
    "lrclib_user_agent": "lyricsync/0.1 (+https://lrclib.net)",
    "request_timeout_seconds": 15,
    "translation_model_template": "Helsinki-NLP/opus-mt-{source}-{target}",
    "translation_models": {
        # Pairs whose Marian model does not follow the template
        "tr": "Helsinki-NLP/opus-mt-tc-big-en-tr",
        "pt": "Helsinki-NLP/opus-mt-tc-big-en-pt",
        "ko": "Helsinki-NLP/opus-mt-tc-big-en-ko",
    },
    "source_language": "en",
    "device": "cpu",
    "spotify_client_id": None,
    "spotify_client_secret": None,
    "spotify_redirect_uri": "http://127.0.0.1:8888/callback",
    "spotify_token_cache": ".spotify_token_cache",
    "log_dir": "logs",
    "log_file": "lyricsync.log",
}

# Environment variables that take precedence over the file.
ENV_OVERRIDES = {
    "SPOTIFY_CLIENT_ID": "spotify_client_id",
    "SPOTIFY_CLIENT_SECRET": "spotify_client_secret",
    "SPOTIFY_REDIRECT_URI": "spotify_redirect_uri",
}

POSITIVE_NUMBERS = ("cache_ttl_seconds", "poll_interval_seconds", "request_timeout_seconds")

class ConfigLoader:
    """Loads configuration settings from a YAML file."""

    def __init__(self, environ: Optional[dict] = None):
        self.environ = os.environ if environ is None else environ

    def read_file(self, config_path: str) -> dict:
        """
        Loads configuration from the specified YAML file path.

        Args:
            config_path: The path to the YAML configuration file.

        Returns:
            A dictionary containing the settings found in the file.

        Raises:
            FileNotFoundError: If the configuration file does not exist.
            ConfigurationError: If the file cannot be parsed as YAML or
                              if there are other reading errors.
        """
        logger.info(f"Attempting to load configuration from: {config_path}")
        if not os.path.exists(config_path):
            logger.error(f"Configuration file not found at path: {config_path}")
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        if not os.path.isfile(config_path):
            logger.error(f"Configuration path is not a file: {config_path}")
            raise ConfigurationError(f"Configuration path is not a file: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing YAML configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Invalid YAML format in {config_path}: {e}") from e
        except IOError as e:
            logger.error(f"Error reading configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Could not read configuration file {config_path}: {e}") from e

        if config is None:
            # Empty file
            return {}
        if not isinstance(config, dict):
            logger.error(f"Configuration file {config_path} did not load as a dictionary (root object).")
            raise ConfigurationError(f"Invalid YAML structure in {config_path}. Root must be a mapping (dictionary).")
        return config

    def load_config(self, config_path: Optional[str] = None) -> dict:
        """
        Builds the effective configuration: defaults, then the YAML file (if
        a path is given), then environment overrides.

        Raises:
            FileNotFoundError: If config_path is given but does not exist.
            ConfigurationError: If the file is invalid or a value is out of range.
        """
        config = dict(DEFAULT_CONFIG)
        if config_path:
            from_file = self.read_file(config_path)
            models = from_file.get("translation_models")
            if isinstance(models, dict):
                # File entries add to the built-in pairs instead of replacing them
                from_file["translation_models"] = {**DEFAULT_CONFIG["translation_models"], **models}
            config.update(from_file)

        for env_name, key in ENV_OVERRIDES.items():
            value = self.environ.get(env_name)
            if value:
                logger.debug(f"Using {key} from environment variable {env_name}.")
                config[key] = value

        validate_config(config)
        logger.info("Configuration loaded successfully.")
        return config

def validate_config(config: dict) -> None:
    """Raises ConfigurationError if a numeric setting is missing or not positive."""
    for key in POSITIVE_NUMBERS:
        value = config.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ConfigurationError(f"'{key}' must be a positive number, got {value!r}.")
    if not isinstance(config.get("translation_models") or {}, dict):
        raise ConfigurationError("'translation_models' must be a mapping of language code to model name.")

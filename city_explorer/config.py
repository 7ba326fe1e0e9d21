"""
Application configuration: YAML settings plus secrets from the environment.
"""
import os

import yaml
from dotenv import load_dotenv

load_dotenv()

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "../config/api.yaml")

# Provider credentials
GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY", "")
DARK_SKY_API_KEY = os.getenv("DARK_SKY_API_KEY", "")
MEETUP_API_KEY = os.getenv("MEETUP_API_KEY", "")


def load_config(config_path=None):
    """
    Load the YAML configuration file.

    Args:
        config_path: Path to the file; defaults to ``$CITY_EXPLORER_CONFIG``
            or ``config/api.yaml``

    Returns:
        dict: Parsed configuration with ``api``, ``database``, ``providers``
        and ``logging`` sections
    """
    config_path = config_path or os.getenv("CITY_EXPLORER_CONFIG", DEFAULT_CONFIG_PATH)
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f) or {}

    for section in ("api", "database", "providers", "logging"):
        config.setdefault(section, {})
    return config


def provider_keys():
    """Provider API keys by environment variable name."""
    return {
        "GOOGLE_MAPS_API_KEY": GOOGLE_MAPS_API_KEY,
        "DARK_SKY_API_KEY": DARK_SKY_API_KEY,
        "MEETUP_API_KEY": MEETUP_API_KEY,
    }

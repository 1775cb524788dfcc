"""
Configuration loading.
"""

import os

import yaml


DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'config.yaml')


def load_config(path=None):
    """
    Load configuration from a YAML file.

    Raises:
        FileNotFoundError: when the file does not exist
    """
    config_path = path or DEFAULT_CONFIG_PATH
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f) or {}

    config.setdefault('claude', {})
    config['claude'].setdefault('api_key_env', 'ANTHROPIC_API_KEY')
    config['claude'].setdefault('max_tokens', 8000)
    config['claude'].setdefault('motivation_max_tokens', 300)
    config.setdefault('database', {}).setdefault('path', 'data/stridecoach.db')
    config.setdefault('output', {}).setdefault('folder', 'output')
    return config


def get_api_key(config):
    """Return the API key named by claude.api_key_env, or None."""
    return os.getenv(config['claude']['api_key_env'])

"""Configuration management for the candle-ai clients."""

import os
from typing import Any

import yaml
from dotenv import load_dotenv

# Provider name -> environment variable holding its API key
PROVIDER_KEY_MAP = {
    "aliyun": "DASHSCOPE_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "openai": "OPENAI_API_KEY",
}


class Configuration:
    """Manages configuration and environment variables for the vendor clients."""

    def __init__(self, config_path: str | None = None) -> None:
        """Initialize configuration from YAML and environment variables.

        Args:
            config_path: YAML file to read; defaults to the bundled config.yaml.
        """
        self.load_env()  # Load .env for API keys
        self.config_path = config_path or os.path.join(
            os.path.dirname(__file__), "config.yaml"
        )
        self._config = self._load_yaml_config()

    @staticmethod
    def load_env() -> None:
        """Load environment variables from .env file."""
        load_dotenv()

    def _load_yaml_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(self.config_path) as file:
            config = yaml.safe_load(file)
            if not isinstance(config, dict):
                raise ValueError(
                    f"Config file must be YAML dict, got {type(config)}"
                )
            return config

    @property
    def active_provider(self) -> str:
        """Name of the provider selected under llm.active."""
        active = self._config.get("llm", {}).get("active")
        if active not in PROVIDER_KEY_MAP:
            raise ValueError(
                f"llm.active must be one of {', '.join(PROVIDER_KEY_MAP)}, "
                f"got {active!r}"
            )
        return active

    def get_api_key(self, provider: str) -> str:
        """Get the API key for ``provider`` from the environment.

        Raises:
            ValueError: If the provider is unknown or its key is not set.
        """
        env_key = PROVIDER_KEY_MAP.get(provider)
        if not env_key:
            raise ValueError(
                f"Unknown provider '{provider}' - no API key mapping found"
            )

        api_key = os.getenv(env_key)
        if not api_key:
            raise ValueError(
                f"API key '{env_key}' not found in environment variables "
                f"for provider '{provider}'"
            )

        return api_key

    @property
    def llm_api_key(self) -> str:
        """API key of the active provider."""
        return self.get_api_key(self.active_provider)

    def get_provider_config(self, provider: str) -> dict[str, Any]:
        """Get one provider's configuration from YAML.

        Returns:
            Provider configuration dictionary with validated values.

        Raises:
            ValueError: If the provider section is missing or invalid.
        """
        providers = self._config.get("llm", {}).get("providers", {})
        if provider not in providers:
            raise ValueError(
                f"Provider '{provider}' not found in providers config"
            )

        provider_config = providers[provider] or {}
        if not isinstance(provider_config, dict):
            raise ValueError(f"llm.providers.{provider} must be a mapping")

        model = provider_config.get("model")
        if model is not None and (not isinstance(model, str) or not model):
            raise ValueError(f"llm.providers.{provider}.model must be a non-empty string")

        timeout = provider_config.get("timeout", 30.0)
        if isinstance(timeout, bool) or not isinstance(timeout, int | float) or timeout <= 0:
            raise ValueError(f"llm.providers.{provider}.timeout must be positive")

        base_url = provider_config.get("base_url")
        if base_url is not None and not str(base_url).startswith(("http://", "https://")):
            raise ValueError(
                f"llm.providers.{provider}.base_url must be an http(s) URL"
            )

        return provider_config

    def get_llm_config(self) -> dict[str, Any]:
        """Get the active provider's configuration."""
        return self.get_provider_config(self.active_provider)

    def get_streaming_config(self) -> dict[str, Any]:
        """Get stream decoder configuration from YAML.

        Raises:
            ValueError: If max_carry_chars is missing or invalid.
        """
        streaming_config = self._config.get("streaming", {})

        if "max_carry_chars" not in streaming_config:
            raise ValueError(
                "streaming.max_carry_chars must be explicitly configured "
                "in config.yaml (use null to disable the limit)"
            )

        limit = streaming_config["max_carry_chars"]
        if limit is not None and (
            isinstance(limit, bool) or not isinstance(limit, int) or limit < 1
        ):
            raise ValueError("streaming.max_carry_chars must be a positive integer or null")

        return streaming_config

    def get_logging_config(self) -> dict[str, Any]:
        """Get logging configuration from YAML."""
        return self._config.get("logging", {})

"""Configuration resolution from CLI values, environment and an optional YAML file."""

import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from ..utils.errors import StartupConfigError
from .models import SolrStatusConfig
from .settings import DEFAULT_HOSTNAME, DEFAULT_INTERVAL_SECS, Settings


FILE_KEYS = {"server", "core", "https", "hostname", "interval", "max_backoff", "log_level"}


class ConfigLoader:
    """Build the immutable SolrStatusConfig used for the process lifetime."""

    @staticmethod
    def load(
        server: Optional[str] = None,
        core: Optional[str] = None,
        use_https: Optional[bool] = None,
        config_path: Optional[str] = None,
        max_backoff: Optional[int] = None,
        log_level: Optional[str] = None
    ) -> SolrStatusConfig:
        """
        Resolve configuration. Precedence: CLI > environment > file > defaults.

        Args:
            server: --server value
            core: --core value
            use_https: --https value (None when the flag was not given)
            config_path: Optional YAML file path
            max_backoff: --max-backoff value
            log_level: --log-level value

        Returns:
            SolrStatusConfig: Validated configuration

        Raises:
            StartupConfigError: Missing required values or invalid configuration
        """
        file_values = ConfigLoader.load_from_file(config_path) if config_path else {}

        server = server or file_values.get("server")
        if not server:
            raise StartupConfigError("no solr server specified. Exiting.")

        core = core or file_values.get("core")
        if not core:
            raise StartupConfigError("no core name specified. Exiting.")

        if use_https is None:
            use_https = file_values.get("https", False)
        if max_backoff is None:
            max_backoff = file_values.get("max_backoff", 0)

        try:
            return SolrStatusConfig(
                server=server,
                core=core,
                use_https=use_https,
                interval=Settings.interval(
                    default=file_values.get("interval", DEFAULT_INTERVAL_SECS)
                ),
                hostname=Settings.hostname(
                    default=file_values.get("hostname") or DEFAULT_HOSTNAME
                ),
                max_backoff=max_backoff,
                log_level=log_level or Settings.log_level(
                    default=file_values.get("log_level") or "INFO"
                )
            )
        except ValidationError as e:
            raise StartupConfigError(f"invalid configuration: {e}") from e

    @staticmethod
    def load_from_file(config_path: str) -> Dict[str, Any]:
        """
        Load settings from YAML file with environment variable substitution.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Dict[str, Any]: Raw values keyed by FILE_KEYS

        Raises:
            StartupConfigError: If the file is missing, unparsable or has unknown keys
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise StartupConfigError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file, 'r') as f:
                raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise StartupConfigError(f"cannot parse configuration file {config_path}: {e}") from e

        if raw_config is None:
            return {}
        if not isinstance(raw_config, dict):
            raise StartupConfigError(f"configuration file {config_path} must contain a mapping")

        unknown = set(raw_config) - FILE_KEYS
        if unknown:
            raise StartupConfigError(
                f"unknown keys in {config_path}: {', '.join(sorted(map(str, unknown)))}"
            )

        return ConfigLoader._substitute_env_vars(raw_config)

    @staticmethod
    def _substitute_env_vars(obj: Any) -> Any:
        """
        Recursively substitute ${ENV_VAR} placeholders with environment values.

        Args:
            obj: Object to process (str, dict, list, or primitive)

        Returns:
            Object with environment variables substituted
        """
        if isinstance(obj, str):
            pattern = r'\$\{(\w+)\}'
            return re.sub(pattern, lambda m: os.getenv(m.group(1), ''), obj)

        elif isinstance(obj, dict):
            return {k: ConfigLoader._substitute_env_vars(v) for k, v in obj.items()}

        elif isinstance(obj, list):
            return [ConfigLoader._substitute_env_vars(item) for item in obj]

        return obj

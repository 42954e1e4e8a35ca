"""Configuration loader with file discovery and validation."""

import hashlib
import time
from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from smart_digest.config.constants import (
    APP_DIR_NAME,
    COMPONENT_CONFIG,
    CONFIG_FILENAME,
)
from smart_digest.config.error_hints import format_validation_errors
from smart_digest.config.schemas import DigestConfig, LlmProvider
from smart_digest.errors import ConfigurationError
from smart_digest.fetch.redact import mask_secret
from smart_digest.settings import AppSettings


logger = structlog.get_logger()


class ConfigLoader:
    """Loads and validates the smart-digest configuration.

    Lookup order for the config file:
    explicit path > ``SMART_DIGEST_CONFIG`` > ``./config.yaml`` >
    ``~/.config/smart-digest/config.yaml`` > built-in defaults.

    Environment API keys fill ``api_key`` only when the file leaves it
    unset.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        cwd: Path | None = None,
        home: Path | None = None,
    ) -> None:
        """Initialize the loader.

        Args:
            settings: Environment settings (read from the process when omitted).
            cwd: Directory searched first for config.yaml.
            home: Home directory used for the XDG-style location.
        """
        self._settings = settings or AppSettings()
        self._cwd = cwd or Path.cwd()
        self._home = home or Path.home()
        self._checksum: str | None = None
        self._source_path: Path | None = None

    @property
    def checksum(self) -> str | None:
        """SHA-256 of the loaded file, None when defaults were used."""
        return self._checksum

    @property
    def source_path(self) -> Path | None:
        """Path of the loaded file, None when defaults were used."""
        return self._source_path

    def find_config_file(self) -> Path | None:
        """Search the standard locations for a config file.

        Returns:
            First existing path, or None.
        """
        candidates = [
            self._cwd / CONFIG_FILENAME,
            self._home / ".config" / APP_DIR_NAME / CONFIG_FILENAME,
        ]
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        return None

    def load(self, path: Path | None = None) -> DigestConfig:
        """Load and validate the configuration.

        Args:
            path: Explicit config file path.

        Returns:
            Validated DigestConfig.

        Raises:
            ConfigurationError: If the file cannot be read, parsed, or validated.
        """
        start_time = time.perf_counter()
        log = logger.bind(component=COMPONENT_CONFIG)

        if path is None and self._settings.config_path:
            path = Path(self._settings.config_path)
        if path is None:
            path = self.find_config_file()

        data: dict[str, object] = {}
        if path is not None:
            data = self._load_yaml_file(path)
            self._source_path = path
            log.info(
                "config_file_loaded",
                file_path=str(path),
                file_sha256=self._checksum,
            )
        else:
            log.info("config_defaults_used")

        self._apply_env_api_key(data)

        try:
            config = DigestConfig.model_validate(data)
        except ValidationError as e:
            errors = format_validation_errors(e)
            log.warning("config_validation_failed", error_count=len(errors))
            location = str(path) if path else "defaults"
            msg = f"invalid configuration ({location}): {'; '.join(errors)}"
            raise ConfigurationError(msg, errors=errors) from e

        log.info(
            "config_validation_complete",
            llm_provider=config.llm_provider.value,
            model=config.effective_model,
            api_key=mask_secret(config.api_key),
            max_workers=config.max_workers,
            rate_limit_per_second=config.rate_limit_per_second,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return config

    def _load_yaml_file(self, file_path: Path) -> dict[str, object]:
        """Read a YAML mapping and record its checksum.

        Raises:
            ConfigurationError: If the file is unreadable or not a mapping.
        """
        try:
            content_bytes = file_path.read_bytes()
        except OSError as e:
            msg = f"failed to read config file {file_path}: {e}"
            raise ConfigurationError(msg) from e

        self._checksum = hashlib.sha256(content_bytes).hexdigest()

        try:
            parsed = yaml.safe_load(content_bytes.decode("utf-8"))
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            msg = f"failed to parse config file {file_path}: {e}"
            raise ConfigurationError(msg) from e

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            msg = f"config file {file_path} must contain a mapping"
            raise ConfigurationError(msg)
        return parsed

    def _apply_env_api_key(self, data: dict[str, object]) -> None:
        if data.get("api_key"):
            return
        provider = data.get("llm_provider", LlmProvider.OPENAI.value)
        env_key = self._settings.api_key_for_provider(str(provider))
        if env_key:
            data["api_key"] = env_key

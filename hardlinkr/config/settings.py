"""Configuration management for hardlinkr."""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class ScanConfig(BaseModel):
    """Directory walking configuration."""
    exclude_patterns: list[str] = Field(default_factory=list)
    min_file_size: int = Field(default=0, ge=0)


class LinkingConfig(BaseModel):
    """Hardlink replacement configuration."""
    dry_run: bool = False
    temp_marker: str = Field(default="aside", pattern=r"^[A-Za-z0-9_-]+$")


class HardlinkrConfig(BaseModel):
    """Main hardlinkr configuration."""
    scan: ScanConfig = Field(default_factory=ScanConfig)
    linking: LinkingConfig = Field(default_factory=LinkingConfig)

    # "single" keeps one representative per key, "multiple" keeps every
    # distinct file seen under a key
    bucket_policy: str = Field(default="multiple", pattern="^(single|multiple)$")
    continue_on_error: bool = True
    hash_chunk_size: int = Field(default=1024 * 1024, ge=4096)

    # Logging
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_file: str | None = None


class ConfigManager:
    """Manages configuration loading and saving."""

    DEFAULT_CONFIG_NAME = "hardlinkr.yaml"

    def __init__(self, config_path: Path | None = None):
        """Initialize config manager."""
        self.config_path = config_path or self._get_default_config_path()
        self._config: HardlinkrConfig | None = None

    def load(self) -> HardlinkrConfig:
        """Load configuration from file, falling back to defaults."""
        if self.config_path.exists():
            try:
                with open(self.config_path, encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
                self._config = HardlinkrConfig.model_validate(data)
                logger.debug("Loaded configuration from %s", self.config_path)
            except Exception as e:
                logger.error("Error loading config from %s: %s", self.config_path, e)
                logger.warning("Using default configuration")
                self._config = HardlinkrConfig()
        else:
            logger.debug("Config file not found at %s, using defaults", self.config_path)
            self._config = HardlinkrConfig()

        return self._config

    def save(self, config: HardlinkrConfig | None = None) -> None:
        """Save configuration to file."""
        config_to_save = config or self._config
        if config_to_save is None:
            raise ValueError("No configuration to save")

        # Ensure directory exists
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        # log_file is omitted while unset
        data = config_to_save.model_dump(mode="json", exclude_none=True)
        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, indent=2)

        logger.info("Configuration saved to %s", self.config_path)

    def _get_default_config_path(self) -> Path:
        """Get default configuration file path."""
        # Look for config in current directory first, then user config dir
        current_dir = Path.cwd() / self.DEFAULT_CONFIG_NAME
        if current_dir.exists():
            return current_dir

        config_dir = Path.home() / ".config" / "hardlinkr"
        return config_dir / self.DEFAULT_CONFIG_NAME


def load_config(config_path: Path | None = None) -> HardlinkrConfig:
    """Load configuration from a specific path or the default location."""
    return ConfigManager(config_path).load()

"""
Configuration for asmdups runs.

Holds the window parameters used to fragment functions and the list of
corpora scanned by the clustering report: each corpus pairs an assembly
directory with the C sources whose ``INCLUDE_ASM`` markers tell which of its
functions still await decompilation. Paths are relative to ``base_dir``.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .core.errors import ConfigError

DEFAULT_CONFIG_FILE = ".asmdups.yml"


@dataclass
class CorpusConfig:
    """An assembly directory and the sources that include it."""

    name: str
    asm_dir: str
    src_dir: str
    # Directory the INCLUDE_ASM paths are resolved against
    include_root: str = "asm/nonmatchings"

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "asm_dir": self.asm_dir,
            "src_dir": self.src_dir,
            "include_root": self.include_root,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CorpusConfig":
        try:
            return cls(
                name=data["name"],
                asm_dir=data["asm_dir"],
                src_dir=data["src_dir"],
                include_root=data.get("include_root", "asm/nonmatchings"),
            )
        except KeyError as e:
            raise ValueError(f"corpus entry is missing {e}") from e


def _default_corpora() -> List[CorpusConfig]:
    return [CorpusConfig(name="OS", asm_dir="asm/matchings", src_dir="src/os")]


@dataclass
class DupsConfig:
    """
    Configuration for duplicate detection.

    The similarity threshold is deliberately not part of the file: it is
    chosen per run on the command line.
    """

    window_stride: int = 4
    window_size: int = 32
    asm_extension: str = ".s"
    src_extension: str = ".c"

    # Root the corpus paths are resolved against and report paths shown relative to
    base_dir: str = "../.."

    # Skip bucket comparisons that cannot reach the threshold on length alone
    length_prefilter: bool = True

    corpora: List[CorpusConfig] = field(default_factory=_default_corpora)

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.window_stride < 1:
            raise ValueError(f"window_stride must be positive, got {self.window_stride}")

        if self.window_size < 1:
            raise ValueError(f"window_size must be positive, got {self.window_size}")

        if not self.asm_extension:
            raise ValueError("asm_extension must not be empty")

        names = [corpus.name for corpus in self.corpora]
        if len(names) != len(set(names)):
            raise ValueError(f"corpus names must be unique, got {names}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "window_stride": self.window_stride,
            "window_size": self.window_size,
            "asm_extension": self.asm_extension,
            "src_extension": self.src_extension,
            "base_dir": self.base_dir,
            "length_prefilter": self.length_prefilter,
            "corpora": [corpus.to_dict() for corpus in self.corpora],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DupsConfig":
        """Create from dictionary representation."""
        corpora_data = data.get("corpora")
        if corpora_data is None:
            corpora = _default_corpora()
        else:
            corpora = [CorpusConfig.from_dict(item) for item in corpora_data]

        return cls(
            window_stride=data.get("window_stride", 4),
            window_size=data.get("window_size", 32),
            asm_extension=data.get("asm_extension", ".s"),
            src_extension=data.get("src_extension", ".c"),
            base_dir=data.get("base_dir", "../.."),
            length_prefilter=data.get("length_prefilter", True),
            corpora=corpora,
        )

    def resolve(self, path: str) -> Path:
        """Resolve a configured path against the base directory."""
        return Path(self.base_dir) / path

    def save_to_file(self, file_path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    @classmethod
    def load_from_file(cls, file_path: Union[str, Path]) -> "DupsConfig":
        """Load configuration from YAML file."""
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        with open(file_path, "r") as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get the default configuration file path."""
        # Look for config in current directory, then home directory
        current_dir_config = Path(DEFAULT_CONFIG_FILE)
        if current_dir_config.exists():
            return current_dir_config

        return Path.home() / DEFAULT_CONFIG_FILE


class ConfigManager:
    """
    Loads configuration from file and applies environment overrides.

    Lookup order: ``ASMDUPS_CONFIG``, the explicit path, ``./.asmdups.yml``,
    ``~/.asmdups.yml``, then built-in defaults.
    """

    ENV_MAPPINGS = {
        "ASMDUPS_WINDOW_STRIDE": ("window_stride", int),
        "ASMDUPS_WINDOW_SIZE": ("window_size", int),
        "ASMDUPS_BASE_DIR": ("base_dir", str),
        "ASMDUPS_LENGTH_PREFILTER": ("length_prefilter", "bool"),
    }

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        self.config_path = Path(config_path) if config_path else None
        self._config: Optional[DupsConfig] = None

    @property
    def config(self) -> DupsConfig:
        """Get the current configuration, loading if necessary."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> DupsConfig:
        """Load configuration from file or environment.

        Raises:
            ConfigError: If the file cannot be parsed or holds invalid values
        """
        try:
            config = self._load_file_config()
            return self.apply_environment_overrides(config)
        except (ValueError, TypeError, AttributeError, yaml.YAMLError, FileNotFoundError) as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def _load_file_config(self) -> DupsConfig:
        env_config_path = os.getenv("ASMDUPS_CONFIG")
        if env_config_path:
            return DupsConfig.load_from_file(env_config_path)

        if self.config_path is not None:
            return DupsConfig.load_from_file(self.config_path)

        default_path = DupsConfig.get_default_config_path()
        if default_path.exists():
            return DupsConfig.load_from_file(default_path)

        return DupsConfig()

    def get_environment_overrides(self) -> Dict[str, Any]:
        """Get configuration overrides from environment variables."""
        overrides: Dict[str, Any] = {}

        for env_var, (config_key, config_type) in self.ENV_MAPPINGS.items():
            env_value = os.getenv(env_var)
            if env_value is None:
                continue
            if config_type == "bool":
                overrides[config_key] = env_value.strip().lower() in ("1", "true", "yes", "on")
                continue
            try:
                overrides[config_key] = config_type(env_value)
            except ValueError as e:
                raise ValueError(
                    f"Invalid environment variable {env_var}={env_value}: {e}"
                )

        return overrides

    def apply_environment_overrides(self, config: DupsConfig) -> DupsConfig:
        """Apply environment variable overrides to configuration."""
        overrides = self.get_environment_overrides()

        if not overrides:
            return config

        config_dict = config.to_dict()
        config_dict.update(overrides)
        return DupsConfig.from_dict(config_dict)


def load_config(config_path: Optional[Union[str, Path]] = None) -> DupsConfig:
    """Load the configuration for a run."""
    return ConfigManager(config_path).config

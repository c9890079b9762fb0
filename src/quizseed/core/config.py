"""
Configuration Management

Centralized configuration management with YAML file support
and environment variable overrides.
"""

import os
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field

import yaml
from dotenv import load_dotenv

from .exceptions import ConfigurationError

# Load .env file if it exists
load_dotenv()


VALIDATION_MODES = ("strict", "permissive")
MERGE_POLICIES = ("keep", "overwrite")


@dataclass
class DatabaseConfig:
    """Database configuration settings."""
    url: str = "sqlite:///database/quiz.db"
    echo: bool = False
    pool_size: int = 5


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    console_level: str = "WARNING"  # Separate level for console output
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str = "logs/quizseed.log"
    max_size: str = "10MB"
    backup_count: int = 5


@dataclass
class SeedingConfig:
    """Seeding behaviour: where fixtures live and how existing rows are treated."""
    fixture_paths: List[str] = field(default_factory=list)
    include_builtin: bool = True
    default_groups: List[str] = field(default_factory=list)
    validation_mode: str = "strict"
    policies: Dict[str, str] = field(default_factory=lambda: {
        "category": "keep",
        "subcategory": "keep",
        "question": "overwrite",
        "user": "keep",
    })

    def __post_init__(self):
        if self.validation_mode not in VALIDATION_MODES:
            raise ConfigurationError(
                f"Invalid validation mode '{self.validation_mode}'",
                {"allowed": list(VALIDATION_MODES)}
            )
        for kind, policy in self.policies.items():
            if policy not in MERGE_POLICIES:
                raise ConfigurationError(
                    f"Invalid merge policy '{policy}' for {kind}",
                    {"allowed": list(MERGE_POLICIES)}
                )

    @property
    def permissive(self) -> bool:
        return self.validation_mode == "permissive"


@dataclass
class AppConfig:
    """Main application configuration."""
    name: str = "Quiz Seed"
    version: str = "1.0.0"
    environment: str = "production"
    debug: bool = False

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    seeding: SeedingConfig = field(default_factory=SeedingConfig)

    @classmethod
    def from_yaml(cls, config_path: Path) -> "AppConfig":
        """Load configuration from YAML file."""
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f) or {}

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")

        return cls.from_dict(config_data, source=str(config_path))

    @classmethod
    def from_dict(cls, config_data: Dict[str, Any], source: str = "<defaults>") -> "AppConfig":
        """Build configuration from a plain mapping, applying environment overrides."""
        # Apply environment variable overrides
        config_data = cls._apply_env_overrides(config_data)

        # Handle nested app configuration structure
        if 'app' in config_data:
            app_config = config_data.pop('app')
            config_data.update(app_config)

        try:
            if 'database' in config_data and isinstance(config_data['database'], dict):
                config_data['database'] = DatabaseConfig(**config_data['database'])

            if 'logging' in config_data and isinstance(config_data['logging'], dict):
                config_data['logging'] = LoggingConfig(**config_data['logging'])

            if 'seeding' in config_data and isinstance(config_data['seeding'], dict):
                seeding_data = config_data['seeding']
                if 'policies' in seeding_data and isinstance(seeding_data['policies'], dict):
                    # Partial policy maps only override the kinds they name
                    policies = SeedingConfig().policies
                    policies.update(seeding_data['policies'])
                    seeding_data['policies'] = policies
                config_data['seeding'] = SeedingConfig(**seeding_data)

            return cls(**config_data)
        except TypeError as e:
            raise ConfigurationError(
                f"Unknown configuration key in {source}: {str(e)}"
            ) from e

    @staticmethod
    def _apply_env_overrides(config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration."""
        env_mappings = {
            'DATABASE_URL': ['database', 'url'],
            'LOG_LEVEL': ['logging', 'level'],
            'DEBUG': ['debug'],
            'ENVIRONMENT': ['environment'],
            'QUIZSEED_VALIDATION_MODE': ['seeding', 'validation_mode'],
        }

        for env_var, config_path in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value:
                current = config_data
                for key in config_path[:-1]:
                    current = current.setdefault(key, {})
                if config_path[-1] == 'debug':
                    env_value = env_value.lower() in ('1', 'true', 'yes')
                current[config_path[-1]] = env_value

        return config_data


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config(config_path: Optional[Path] = None) -> AppConfig:
    """Get the application configuration instance."""
    global _config

    if _config is None:
        if config_path is None:
            config_path = Path("config/default.yaml")

        if config_path.exists():
            _config = AppConfig.from_yaml(config_path)
        else:
            # Use default configuration if file doesn't exist
            _config = AppConfig.from_dict({})

    return _config


def set_config(config: AppConfig) -> None:
    """Set the global configuration instance (useful for testing)."""
    global _config
    _config = config


def reload_config(config_path: Optional[Path] = None) -> AppConfig:
    """Reload configuration from file."""
    global _config
    _config = None
    return get_config(config_path)

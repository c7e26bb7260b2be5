"""Configuration management using Pydantic Settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sparql_scout import __version__
from sparql_scout.core.exceptions import ConfigError


class ProberSettings(BaseSettings):
    """Endpoint prober configuration."""
    
    timeout_ms: int = Field(
        default=8000,
        gt=0,
        description="Per-request timeout in milliseconds"
    )
    
    follow_redirects: bool = Field(
        default=True,
        description="Follow HTTP redirects"
    )
    
    max_redirects: int = Field(
        default=20,
        ge=0,
        le=50,
        description="Maximum number of redirects to follow"
    )
    
    verify_ssl: bool = Field(
        default=True,
        description="Verify SSL certificates"
    )
    
    http2: bool = Field(
        default=True,
        description="Negotiate HTTP/2 where the server supports it"
    )
    
    user_agent: str = Field(
        default=f"sparql-scout/{__version__}",
        description="User-Agent header for requests"
    )
    
    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0


class EngineSettings(BaseSettings):
    """Verification engine configuration."""
    
    concurrency: int = Field(
        default=10,
        description="Number of concurrent probe workers (values below 1 run one worker)"
    )
    
    strict: bool = Field(
        default=False,
        description="Only export portals that declare an explicit SPARQL endpoint"
    )


class FilterSettings(BaseSettings):
    """Record selection configuration."""
    
    country: str = Field(
        default="",
        description="Keep only portals whose inCountryEn matches (case-insensitive)"
    )


class OutputSettings(BaseSettings):
    """Output configuration."""
    
    output_path: Path = Field(
        default=Path("sparql_portals.json"),
        description="Result document path"
    )
    
    verbose: bool = Field(
        default=False,
        description="Enable verbose output"
    )


class LoggingSettings(BaseSettings):
    """Logging configuration."""
    
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Minimum log level"
    )
    
    json_format: bool = Field(
        default=False,
        description="Emit JSON log lines instead of console output"
    )
    
    log_file: Path | None = Field(
        default=None,
        description="Optional file to copy log output to"
    )


class Settings(BaseSettings):
    """Main configuration container."""
    
    model_config = SettingsConfigDict(
        env_prefix="SPARQL_SCOUT_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )
    
    prober: ProberSettings = Field(default_factory=ProberSettings)
    engine: EngineSettings = Field(default_factory=EngineSettings)
    filter: FilterSettings = Field(default_factory=FilterSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    
    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from a YAML configuration file."""
        if not path.exists():
            return cls()
        
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        
        return cls(**data)
    
    @classmethod
    def from_file_or_default(cls, path: Path | None = None) -> "Settings":
        """Load from file if exists, otherwise return defaults."""
        default_paths = [
            Path("sparql-scout.yaml"),
            Path("sparql-scout.yml"),
            Path(".sparql-scout.yaml"),
            Path.home() / ".config" / "sparql-scout" / "config.yaml",
        ]
        
        if path and path.exists():
            return cls.from_yaml(path)
        
        for default_path in default_paths:
            if default_path.exists():
                return cls.from_yaml(default_path)
        
        return cls()

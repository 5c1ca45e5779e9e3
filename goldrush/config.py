"""Configuration management for the gold-retrieval agent."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)


@dataclass
class AgentConfig:
    """Planner settings."""

    # Largest environment dimension the world model must hold
    max_grid: int = 80
    # Upper bound on stones tried in one placement search (None = all held)
    max_stone_depth: Optional[int] = None


@dataclass
class ClientConfig:
    """Game engine connection settings."""

    host: str = "localhost"
    port: int = 31415
    timeout: Optional[float] = None


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None
    log_map: bool = False  # Dump the world map at DEBUG every turn


@dataclass
class Config:
    """Main configuration container."""

    agent: AgentConfig = field(default_factory=AgentConfig)
    client: ClientConfig = field(default_factory=ClientConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to config file. Defaults to config/default.yaml

    Returns:
        Populated Config dataclass
    """
    if config_path is None:
        # Look for config in standard locations
        candidates = [
            Path("config/default.yaml"),
            Path(__file__).parent.parent / "config" / "default.yaml",
        ]
        for candidate in candidates:
            if candidate.exists():
                config_path = str(candidate)
                break

    config = Config()

    if config_path and Path(config_path).exists():
        with open(config_path) as f:
            data = yaml.safe_load(f)

        if data:
            # Load each section
            if "agent" in data:
                config.agent = AgentConfig(**data["agent"])
            if "client" in data:
                config.client = ClientConfig(**data["client"])
            if "logging" in data:
                config.logging = LoggingConfig(**data["logging"])

    # Environment variable overrides
    if os.environ.get("GOLDRUSH_HOST"):
        config.client.host = os.environ["GOLDRUSH_HOST"]
    if os.environ.get("GOLDRUSH_PORT"):
        config.client.port = int(os.environ["GOLDRUSH_PORT"])
    if os.environ.get("GOLDRUSH_LOG_LEVEL"):
        config.logging.level = os.environ["GOLDRUSH_LOG_LEVEL"]

    return config


def setup_logging(config: LoggingConfig) -> None:
    """
    Configure logging based on configuration.

    Args:
        config: Logging configuration
    """
    level = getattr(logging, config.level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if config.file:
        # Ensure log directory exists
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(config.file))

    logging.basicConfig(
        level=level,
        format=config.format,
        handlers=handlers,
    )

    logger.info(f"Logging configured at level {config.level}")

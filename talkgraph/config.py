"""
Configuration for TalkGraph.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = "openai"  # openai, ollama
    model: str = "gpt-3.5-turbo"
    base_url: str | None = None
    api_key: str | None = None
    temperature: float = 0.7
    max_tokens: int = 2000
    timeout: float = 120.0


class AnalysisConfig(BaseModel):
    """Content analysis configuration."""

    # Content above this budget is truncated before prompting
    max_input_tokens: int = 12000
    tokenizer_encoding: str = "cl100k_base"
    tokenizer_provider: str = "tiktoken"  # tiktoken, approximate
    chars_per_token: float = 4.0


class StorageConfig(BaseModel):
    """Saved graph storage configuration."""

    backend: str = "filesystem"  # filesystem, sqlite, memory
    graphs_dir: str = "data/graphs"
    db_path: str = "data/talkgraph.db"


class LibraryConfig(BaseModel):
    """Uploaded file library configuration."""

    uploads_dir: str = "data/uploads"
    metadata_dir: str = "data/metadata"


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "0.0.0.0"
    port: int = 5001
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = False
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    library: LibraryConfig = Field(default_factory=LibraryConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in working directory)

        Returns:
            Config instance

        Environment variables:
            TALKGRAPH_LLM_PROVIDER: LLM provider (openai, ollama)
            TALKGRAPH_LLM_MODEL: LLM model name
            TALKGRAPH_LLM_BASE_URL: LLM base URL
            TALKGRAPH_LLM_API_KEY: LLM API key (falls back to OPENAI_API_KEY)
            TALKGRAPH_ANALYSIS_MAX_INPUT_TOKENS: Token budget for analyzed content
            TALKGRAPH_STORAGE_BACKEND: Saved graph backend (filesystem, sqlite, memory)
            TALKGRAPH_STORAGE_GRAPHS_DIR: Directory for the filesystem backend
            TALKGRAPH_STORAGE_DB_PATH: Database path for the sqlite backend
            TALKGRAPH_UPLOADS_DIR: Directory for uploaded files
            TALKGRAPH_METADATA_DIR: Directory for uploaded file metadata
            TALKGRAPH_HOST / TALKGRAPH_PORT: Server bind address
            TALKGRAPH_LOG_LEVEL: Log level
        """
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None or value == "":
                return default
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float):
                return float(value)
            if isinstance(default, list):
                return [item.strip() for item in value.split(",") if item.strip()]
            return value

        return cls(
            llm=LLMConfig(
                provider=get_env("TALKGRAPH_LLM_PROVIDER", "openai"),
                model=get_env("TALKGRAPH_LLM_MODEL", "gpt-3.5-turbo"),
                base_url=get_env("TALKGRAPH_LLM_BASE_URL"),
                api_key=get_env("TALKGRAPH_LLM_API_KEY", get_env("OPENAI_API_KEY")),
                temperature=get_env("TALKGRAPH_LLM_TEMPERATURE", 0.7),
                max_tokens=get_env("TALKGRAPH_LLM_MAX_TOKENS", 2000),
                timeout=get_env("TALKGRAPH_LLM_TIMEOUT", 120.0),
            ),
            analysis=AnalysisConfig(
                max_input_tokens=get_env("TALKGRAPH_ANALYSIS_MAX_INPUT_TOKENS", 12000),
                tokenizer_encoding=get_env("TALKGRAPH_ANALYSIS_TOKENIZER_ENCODING", "cl100k_base"),
                tokenizer_provider=get_env("TALKGRAPH_ANALYSIS_TOKENIZER_PROVIDER", "tiktoken"),
                chars_per_token=get_env("TALKGRAPH_ANALYSIS_CHARS_PER_TOKEN", 4.0),
            ),
            storage=StorageConfig(
                backend=get_env("TALKGRAPH_STORAGE_BACKEND", "filesystem"),
                graphs_dir=get_env("TALKGRAPH_STORAGE_GRAPHS_DIR", "data/graphs"),
                db_path=get_env("TALKGRAPH_STORAGE_DB_PATH", "data/talkgraph.db"),
            ),
            library=LibraryConfig(
                uploads_dir=get_env("TALKGRAPH_UPLOADS_DIR", "data/uploads"),
                metadata_dir=get_env("TALKGRAPH_METADATA_DIR", "data/metadata"),
            ),
            server=ServerConfig(
                host=get_env("TALKGRAPH_HOST", "0.0.0.0"),
                port=get_env("TALKGRAPH_PORT", 5001),
                cors_origins=get_env("TALKGRAPH_CORS_ORIGINS", ["*"]),
            ),
            logging=LoggingConfig(
                level=get_env("TALKGRAPH_LOG_LEVEL", "INFO"),
                log_to_file=get_env("TALKGRAPH_LOG_TO_FILE", False),
                log_dir=get_env("TALKGRAPH_LOG_DIR", "logs"),
                file_rotation=get_env("TALKGRAPH_LOG_FILE_ROTATION", "10 MB"),
                file_retention=get_env("TALKGRAPH_LOG_FILE_RETENTION", "7 days"),
                compression=get_env("TALKGRAPH_LOG_COMPRESSION", "zip"),
                serialize=get_env("TALKGRAPH_LOG_SERIALIZE", True),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance
        """
        if yaml_path and Path(yaml_path).exists():
            with open(yaml_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            config_dict = {}

        env_config = cls.from_env(env_file=env_file)

        # Sections whose env values differ from the defaults override YAML
        final_dict = {**config_dict}
        default = cls()
        for section in ("llm", "analysis", "storage", "library", "server", "logging"):
            env_section = getattr(env_config, section)
            if env_section != getattr(default, section):
                final_dict[section] = env_section.model_dump()

        return cls(**final_dict) if final_dict else env_config


# Default config instance
default_config = Config()

"""
Tests for configuration management.

Tests config loading from:
1. Environment variables
2. YAML files
3. Combined (env overrides YAML)
"""

import os
from unittest.mock import patch

import pytest
import yaml

from talkgraph.config import AnalysisConfig, Config, LLMConfig, StorageConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove TalkGraph settings inherited from the outer environment."""
    for key in list(os.environ):
        if key.startswith("TALKGRAPH_") or key == "OPENAI_API_KEY":
            monkeypatch.delenv(key)


class TestConfigDefaults:
    """Test default configuration values."""

    def test_default_config_creation(self):
        """Test creating config with defaults."""
        config = Config()

        # LLM defaults
        assert config.llm.provider == "openai"
        assert config.llm.model == "gpt-3.5-turbo"
        assert config.llm.api_key is None
        assert config.llm.temperature == 0.7
        assert config.llm.max_tokens == 2000

        # Analysis defaults
        assert config.analysis.max_input_tokens == 12000
        assert config.analysis.tokenizer_provider == "tiktoken"

        # Storage defaults
        assert config.storage.backend == "filesystem"
        assert config.storage.graphs_dir == "data/graphs"
        assert config.library.uploads_dir == "data/uploads"
        assert config.library.metadata_dir == "data/metadata"

        # Server defaults
        assert config.server.port == 5001
        assert config.server.cors_origins == ["*"]
        assert config.logging.log_to_file is False

    def test_llm_config_creation(self):
        """Test creating LLM config."""
        llm_config = LLMConfig(
            provider="ollama",
            model="llama3.1:8b",
            base_url="http://ollama:11434",
            temperature=0.0,
        )

        assert llm_config.provider == "ollama"
        assert llm_config.base_url == "http://ollama:11434"
        assert llm_config.temperature == 0.0


class TestConfigFromEnv:
    """Test loading configuration from environment variables."""

    def test_from_env_basic(self, monkeypatch):
        """Test loading basic config from environment."""
        monkeypatch.setenv("TALKGRAPH_LLM_PROVIDER", "ollama")
        monkeypatch.setenv("TALKGRAPH_LLM_MODEL", "mistral")
        monkeypatch.setenv("TALKGRAPH_LLM_BASE_URL", "http://ollama:11434")
        monkeypatch.setenv("TALKGRAPH_STORAGE_BACKEND", "sqlite")
        monkeypatch.setenv("TALKGRAPH_STORAGE_DB_PATH", "/tmp/graphs.db")

        config = Config.from_env()

        assert config.llm.provider == "ollama"
        assert config.llm.model == "mistral"
        assert config.llm.base_url == "http://ollama:11434"
        assert config.storage.backend == "sqlite"
        assert config.storage.db_path == "/tmp/graphs.db"

    def test_openai_key_fallback(self, monkeypatch):
        """The standard OpenAI variable is used when no TalkGraph key is set."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-standard")

        assert Config.from_env().llm.api_key == "sk-standard"

        monkeypatch.setenv("TALKGRAPH_LLM_API_KEY", "sk-specific")

        assert Config.from_env().llm.api_key == "sk-specific"

    def test_from_env_with_numbers(self, monkeypatch):
        """Test loading numeric values from environment."""
        monkeypatch.setenv("TALKGRAPH_LLM_TEMPERATURE", "0.2")
        monkeypatch.setenv("TALKGRAPH_LLM_MAX_TOKENS", "4000")
        monkeypatch.setenv("TALKGRAPH_ANALYSIS_MAX_INPUT_TOKENS", "8000")
        monkeypatch.setenv("TALKGRAPH_PORT", "8080")

        config = Config.from_env()

        assert config.llm.temperature == 0.2
        assert config.llm.max_tokens == 4000
        assert config.analysis.max_input_tokens == 8000
        assert config.server.port == 8080

    def test_from_env_with_booleans_and_lists(self, monkeypatch):
        """Test loading boolean and list values from environment."""
        monkeypatch.setenv("TALKGRAPH_LOG_TO_FILE", "yes")
        monkeypatch.setenv("TALKGRAPH_LOG_SERIALIZE", "0")
        monkeypatch.setenv("TALKGRAPH_CORS_ORIGINS", "http://localhost:3000, https://app.example.com")

        config = Config.from_env()

        assert config.logging.log_to_file is True
        assert config.logging.serialize is False
        assert config.server.cors_origins == ["http://localhost:3000", "https://app.example.com"]

    def test_empty_values_use_defaults(self, monkeypatch):
        """Empty variables are treated as unset."""
        monkeypatch.setenv("TALKGRAPH_LLM_MODEL", "")

        assert Config.from_env().llm.model == "gpt-3.5-turbo"

    def test_from_env_with_dotenv_file(self, tmp_path):
        """Test loading from .env file."""
        env_file = tmp_path / ".env.test"
        env_file.write_text(
            """
TALKGRAPH_LLM_PROVIDER=ollama
TALKGRAPH_LLM_MODEL=llama3.1:8b
TALKGRAPH_UPLOADS_DIR=/srv/uploads
"""
        )

        with patch.dict(os.environ):
            config = Config.from_env(env_file=str(env_file))

        assert config.llm.provider == "ollama"
        assert config.llm.model == "llama3.1:8b"
        assert config.library.uploads_dir == "/srv/uploads"


class TestConfigFromYAML:
    """Test loading configuration from YAML files."""

    def test_from_yaml_basic(self, tmp_path):
        """Test loading config from YAML file."""
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text(
            yaml.dump(
                {
                    "llm": {"provider": "ollama", "model": "mistral"},
                    "storage": {"backend": "memory"},
                    "analysis": {"max_input_tokens": 500},
                }
            )
        )

        config = Config.from_yaml(yaml_file)

        assert config.llm.provider == "ollama"
        assert config.llm.model == "mistral"
        assert config.storage.backend == "memory"
        assert config.analysis.max_input_tokens == 500
        assert config.server.port == 5001

    def test_from_yaml_missing_file(self, tmp_path):
        """Test that a missing YAML file raises."""
        with pytest.raises(FileNotFoundError):
            Config.from_yaml(tmp_path / "nope.yaml")

    def test_from_yaml_empty_file(self, tmp_path):
        """An empty YAML file yields defaults."""
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert Config.from_yaml(yaml_file) == Config()


class TestConfigCombined:
    """Test env overriding YAML."""

    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        """Sections set in the environment win over YAML."""
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text(
            yaml.dump(
                {
                    "llm": {"provider": "ollama", "model": "from-yaml"},
                    "storage": {"backend": "sqlite"},
                }
            )
        )
        monkeypatch.setenv("TALKGRAPH_STORAGE_BACKEND", "memory")

        config = Config.from_env_or_yaml(yaml_path=yaml_file)

        assert config.storage.backend == "memory"
        assert config.llm.model == "from-yaml"

    def test_no_yaml(self, monkeypatch):
        """Without YAML the environment config is used."""
        monkeypatch.setenv("TALKGRAPH_LLM_MODEL", "gpt-4o-mini")

        config = Config.from_env_or_yaml(yaml_path=None)

        assert config.llm.model == "gpt-4o-mini"


class TestSectionConfigs:
    """Test individual section models."""

    def test_analysis_config(self):
        config = AnalysisConfig(tokenizer_provider="approximate", chars_per_token=3.5)

        assert config.tokenizer_provider == "approximate"
        assert config.chars_per_token == 3.5

    def test_storage_config(self):
        config = StorageConfig(backend="sqlite", db_path=":memory:")

        assert config.backend == "sqlite"
        assert config.db_path == ":memory:"

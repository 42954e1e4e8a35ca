"""Constants for configuration loading and logging context."""

# Config file discovery
CONFIG_FILENAME = "config.yaml"
APP_DIR_NAME = "smart-digest"

# Defaults mirrored by DigestConfig
DEFAULT_INTERESTS = ("Go", "Rust", "Productivity", "System Design")
DEFAULT_THRESHOLD = 70
DEFAULT_MAX_WORKERS = 5
DEFAULT_RATE_LIMIT_PER_SECOND = 10.0
DEFAULT_OLLAMA_URL = "http://localhost:11434"

DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "ollama": "llama3",
    "gemini": "gemini-2.5-flash",
}

# Component names for log binding
COMPONENT_CLI = "cli"
COMPONENT_CONFIG = "config"
COMPONENT_PIPELINE = "pipeline"

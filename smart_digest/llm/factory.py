"""Factory for creating the configured scoring backend."""

import structlog

from smart_digest.config.schemas import DigestConfig, LlmProvider
from smart_digest.errors import ConfigurationError
from smart_digest.llm.protocols import ScoringBackend


logger = structlog.get_logger()


def create_scoring_backend(config: DigestConfig) -> ScoringBackend:
    """Create the scoring backend selected by ``config.llm_provider``.

    This is the only place a backend implementation is chosen; the
    pipeline works against the ``ScoringBackend`` protocol.

    Args:
        config: Validated configuration.

    Returns:
        A ScoringBackend implementation ready for use.

    Raises:
        ConfigurationError: If the provider is unsupported or lacks credentials.
    """
    log = logger.bind(component="llm", subcomponent="factory")
    model = config.effective_model

    if config.llm_provider == LlmProvider.OPENAI:
        from smart_digest.llm.openai_backend import OpenAIBackend

        log.info("scoring_backend_created", provider="openai", model=model)
        return OpenAIBackend(api_key=config.api_key or "", model=model)

    if config.llm_provider == LlmProvider.OLLAMA:
        from smart_digest.llm.ollama_backend import OllamaBackend

        log.info(
            "scoring_backend_created",
            provider="ollama",
            model=model,
            base_url=config.ollama_url,
        )
        return OllamaBackend(base_url=config.ollama_url, model=model)

    if config.llm_provider == LlmProvider.GEMINI:
        from smart_digest.llm.gemini_backend import GeminiBackend

        log.info("scoring_backend_created", provider="gemini", model=model)
        return GeminiBackend(api_key=config.api_key or "", model=model)

    msg = f"unsupported LLM provider: {config.llm_provider}"
    raise ConfigurationError(msg)

"""smart-digest: score web articles against your interests with an LLM."""

__version__ = "0.1.0"

"""Prompt templates for article relevance scoring."""


_SYSTEM_TEMPLATE = """You are an assistant to a busy software engineer. Read the article below, \
score it from 0 to 100 against the reader's interests: [{interests}], \
and summarize it in English.

## Scoring Rubric
- 90-100: Directly about the interests and immediately useful in practice
- 70-89: Related to the interests and worth reading
- 50-69: Possibly related in an indirect way
- 30-49: Only loosely related
- 0-29: Essentially unrelated to the interests

## Output Format
Respond ONLY with a JSON object in exactly this shape, with no other text:

{{
  "score": <integer from 0 to 100>,
  "summary": [
    "<key point 1: one concise sentence>",
    "<key point 2: one concise sentence>",
    "<key point 3: one concise sentence>"
  ],
  "category": "<the single most fitting category tag>"
}}"""

_USER_TEMPLATE = """Analyze the following article:

---
{content}
---"""


def format_interests(interests: list[str]) -> str:
    """Join interests into the comma-separated form used in prompts."""
    return ", ".join(interest.strip() for interest in interests if interest.strip())


def build_system_prompt(interests: list[str]) -> str:
    """Build the system prompt carrying the rubric and output schema.

    Args:
        interests: The reader's interest list.

    Returns:
        Formatted system prompt.
    """
    return _SYSTEM_TEMPLATE.format(interests=format_interests(interests))


def build_user_prompt(article_content: str) -> str:
    """Build the user prompt wrapping the article body.

    Args:
        article_content: Cleaned article text.

    Returns:
        Formatted user prompt.
    """
    return _USER_TEMPLATE.format(content=article_content)

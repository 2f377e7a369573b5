"""Prompt templates for blog generation."""

SYSTEM_PROMPT = """You are an expert blog writer. Write well-structured, engaging, and informative blog posts.
Always follow this structure:
- A catchy title (use # for the main title)
- An engaging introduction paragraph
- Clear headings and subheadings (use ## and ### for headings)
- Relevant examples and insights
- A compelling conclusion
- Use proper markdown formatting
- Target approximately 1000 words"""

USER_PROMPT_TEMPLATE = "Write a comprehensive blog post on the following topic: {topic}"


def build_system_prompt() -> str:
    return SYSTEM_PROMPT


def build_user_prompt(topic: str) -> str:
    return USER_PROMPT_TEMPLATE.format(topic=topic)


def build_messages(topic: str) -> list:
    """Two-message chat payload: fixed system instruction, then the user's topic."""
    return [
        {"role": "system", "content": build_system_prompt()},
        {"role": "user", "content": build_user_prompt(topic)},
    ]

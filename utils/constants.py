"""
Constants and prompt templates for the Wayne AI Gateway.
"""

CODE_GENERATION_PROMPT = """Write {language} code that: {prompt}

Requirements:
- Return only the code
- Include appropriate comments
- Use best practices for {language}
- Format the code properly"""

CODE_EXPLANATION_PROMPT = """Explain this {language} code:

{code}

Explanation should:
- Describe what the code does
- Explain key functions or methods
- Note any important algorithms or patterns
- Be concise but comprehensive"""

TEXT_TYPE_PROMPTS = {
    "article": """Write a comprehensive article about: {prompt}

Include:
- An introduction
- Key points
- Supporting details
- A conclusion""",
    "summary": """Create a concise summary of: {prompt}

Include only the most important information in bullet points""",
    "story": """Write a creative story about: {prompt}

Include:
- Interesting characters
- A clear plot
- Dialogue
- A satisfying ending""",
    "poem": """Compose a poem about: {prompt}

Use creative language and vivid imagery""",
    "email": """Write a professional email about: {prompt}

Use appropriate tone and structure""",
}

CHAT_ERROR_MESSAGE = "Sorry, I encountered an error. Please try again later."


class StorageKeys:
    """Keys used in the JSON store."""
    TEXT_HISTORY = "wayne-ai_textHistory"
    IMAGE_HISTORY = "wayne-ai_imageHistory"
    CODE_HISTORY = "wayne-ai_codeHistory"
    CHAT_ARCHIVE = "wayne-ai_chatHistory"
    CHAT_SESSION_PREFIX = "wayne-ai-chat-history:"

    @classmethod
    def chat_session(cls, session_id: str) -> str:
        return f"{cls.CHAT_SESSION_PREFIX}{session_id}"


class HistoryKind:
    """Generation history identifiers."""
    TEXT, IMAGE, CODE = "text", "image", "code"

    KEYS = {
        TEXT: StorageKeys.TEXT_HISTORY,
        IMAGE: StorageKeys.IMAGE_HISTORY,
        CODE: StorageKeys.CODE_HISTORY,
    }

"""Groq inference API. OpenAI-compatible."""

from promptline.llm.adapters.openai_compat import OpenAICompatAdapter


class GroqAdapter(OpenAICompatAdapter):
    name = "groq"
    base_url = "https://api.groq.com/openai/v1"
    static_models = (
        "llama-3.3-70b-versatile",
        "llama-3.1-8b-instant",
        "gemma2-9b-it",
    )

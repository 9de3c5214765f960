"""LLM provider adapters package."""

from promptline.llm.adapters.anthropic import AnthropicAdapter
from promptline.llm.adapters.base import BaseAdapter
from promptline.llm.adapters.deepseek import DeepSeekAdapter
from promptline.llm.adapters.gemini import GeminiAdapter
from promptline.llm.adapters.groq import GroqAdapter
from promptline.llm.adapters.mistral import MistralAdapter
from promptline.llm.adapters.openai import OpenAIAdapter
from promptline.llm.adapters.openai_compat import OpenAICompatAdapter
from promptline.llm.adapters.openrouter import OpenRouterAdapter
from promptline.llm.adapters.together import TogetherAdapter

__all__ = [
    "AnthropicAdapter",
    "BaseAdapter",
    "DeepSeekAdapter",
    "GeminiAdapter",
    "GroqAdapter",
    "MistralAdapter",
    "OpenAIAdapter",
    "OpenAICompatAdapter",
    "OpenRouterAdapter",
    "TogetherAdapter",
]

"""Prompt template loading and assembly."""

from promptline.prompts.loader import assemble, list_prompts, load_prompt, resolve_prompt

__all__ = ["assemble", "list_prompts", "load_prompt", "resolve_prompt"]

"""promptline - send one prompt to one of several LLM providers and print the reply."""

__version__ = "0.3.0"

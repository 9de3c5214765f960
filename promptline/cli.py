"""Command-line interface.

Examples:
    promptline -m openai:gpt-4o "Summarize this" < notes.txt
    promptline -m anthropic:claude-sonnet-4-20250514 --max-tokens max review
    promptline --list-models --all
"""

import asyncio
import sys
from typing import Optional

import click
import structlog

from promptline import __version__
from promptline.config.settings import Settings, load_settings
from promptline.errors import ConfigError, PromptlineError
from promptline.llm.client import PromptClient
from promptline.llm.factory import list_provider_names, split_model
from promptline.llm.types import ProviderName
from promptline.main import configure_logging
from promptline.prompts.loader import list_prompts as list_prompt_names
from promptline.prompts.loader import resolve_prompt

logger = structlog.get_logger()


def _read_stdin() -> Optional[str]:
    """Piped stdin, or None when attached to a terminal."""
    stream = click.get_text_stream("stdin")
    if stream.isatty():
        return None
    return stream.read()


def _listing_providers(
    settings: Settings,
    all_providers: bool,
    provider: Optional[str],
    model: Optional[str],
) -> list[str]:
    if all_providers:
        return list_provider_names()
    if model or settings.default_model:
        try:
            return [split_model(model, provider, settings)[0]]
        except ConfigError:
            pass
    name = provider or settings.default_provider
    if not name:
        return list_provider_names()
    try:
        return [ProviderName.parse(name).value]
    except ValueError as e:
        raise ConfigError(str(e)) from e


async def _run(
    settings: Settings,
    args: tuple[str, ...],
    provider: Optional[str],
    model: Optional[str],
    temperature: Optional[float],
    max_tokens: Optional[str],
    list_models_flag: bool,
    all_providers: bool,
) -> None:
    client = PromptClient.from_settings(settings)

    if list_models_flag:
        providers = _listing_providers(settings, all_providers, provider, model)
        for line in await client.list_all_models(providers):
            click.echo(line)
        return

    provider_name, model_name = split_model(model, provider, settings)

    prompt = resolve_prompt(args, settings.resolved_prompts_dir(), _read_stdin())
    if not prompt.strip():
        raise ConfigError(
            "Prompt is empty. Provide a prompt as an argument or pipe content from stdin."
        )

    logger.debug("prompt_run_started", provider=provider_name, model=model_name)
    response = await client.run_prompt(
        provider_name,
        model_name,
        prompt,
        temperature=temperature,
        max_tokens=max_tokens,
    )
    # Raw output only; no trailing newline beyond what the model returns.
    click.echo(response, nl=False)


@click.command("promptline")
@click.argument("args", nargs=-1)
@click.option("--provider", "-p", type=str, default=None, help="Override provider")
@click.option("--model", "-m", type=str, default=None, help="Model as provider:model or a bare model id")
@click.option("--temperature", "-t", type=float, default=None, help="Sampling temperature")
@click.option(
    "--max-tokens",
    type=str,
    default=None,
    help="Output token limit, or 'max' for the model's known ceiling",
)
@click.option("--config", "-c", "config_path", type=click.Path(dir_okay=False), default=None, help="Custom config path")
@click.option("--list-providers", is_flag=True, help="List supported providers")
@click.option("--list-prompts", is_flag=True, help="List available prompt templates")
@click.option("--list-models", "list_models_flag", is_flag=True, help="List models for the selected provider")
@click.option("--all", "-a", "all_providers", is_flag=True, help="With --list-models, query every provider")
@click.option("--verbose", "-v", is_flag=True, help="Verbose logging to stderr")
@click.version_option(__version__, prog_name="promptline")
def cli(
    args: tuple[str, ...],
    provider: Optional[str],
    model: Optional[str],
    temperature: Optional[float],
    max_tokens: Optional[str],
    config_path: Optional[str],
    list_providers: bool,
    list_prompts: bool,
    list_models_flag: bool,
    all_providers: bool,
    verbose: bool,
) -> None:
    """Send a prompt to an LLM provider and print the raw response.

    \b
    ARGS: a prompt template name or literal prompt text, followed by extra
    words appended to it. Piped stdin is appended after a separator.
    """
    configure_logging(verbose)

    if list_providers:
        for name in list_provider_names():
            click.echo(name)
        return

    try:
        settings = load_settings(config_path)

        if list_prompts:
            for name in list_prompt_names(settings.resolved_prompts_dir()):
                click.echo(name)
            return

        asyncio.run(
            _run(
                settings,
                args,
                provider,
                model,
                temperature,
                max_tokens,
                list_models_flag,
                all_providers,
            )
        )
    except PromptlineError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

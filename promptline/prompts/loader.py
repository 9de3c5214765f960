"""
Prompt Loader - Resolve the text sent to the model.

Templates are Markdown files named ``<prompts_dir>/<name>.md``. The first CLI
argument is a template name when such a file exists, otherwise it is the
literal prompt. Remaining arguments and piped stdin are appended.
"""

from pathlib import Path
from typing import Optional, Sequence

from promptline.errors import PromptNotFoundError

STDIN_SEPARATOR = "\n\n-----\n\n"


def load_prompt(name: str, prompts_dir: Path) -> str:
    """Read ``<prompts_dir>/<name>.md``."""
    path = Path(prompts_dir) / f"{name}.md"
    if not path.is_file():
        raise PromptNotFoundError(name)
    return path.read_text(encoding="utf-8")


def list_prompts(prompts_dir: Path) -> list[str]:
    """Template names (file stems), sorted. Missing directory means none."""
    prompts_dir = Path(prompts_dir)
    if not prompts_dir.is_dir():
        return []
    return sorted(p.stem for p in prompts_dir.glob("*.md") if p.is_file())


def assemble(prompt: str, extra_args: Sequence[str] = (), stdin: Optional[str] = None) -> str:
    """Join template, extra arguments and stdin into the final prompt."""
    text = prompt
    if extra_args:
        text = " ".join([text, *extra_args]) if text else " ".join(extra_args)
    if stdin:
        text = f"{text}{STDIN_SEPARATOR}{stdin}" if text else stdin
    return text


def resolve_prompt(args: Sequence[str], prompts_dir: Path, stdin: Optional[str] = None) -> str:
    """Build the final prompt from positional CLI arguments and stdin."""
    if not args:
        return assemble("", (), stdin)

    first, rest = args[0], args[1:]
    try:
        content = load_prompt(first, prompts_dir)
    except PromptNotFoundError:
        content = first
    return assemble(content, rest, stdin)

"""Command-line interface for promptweave."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from promptweave import __version__
from promptweave.config import (
    ProjectConfig,
    TokenizerConfig,
    find_project_root,
    load_config,
    save_config,
    set_config_value,
)
from promptweave.exceptions import BudgetExceededError, ConfigError
from promptweave.ui.console import Console

console = Console()


def _load_project_config(path: str | None = None) -> tuple[Path | None, ProjectConfig]:
    """Load config for the project at `path` (or the enclosing one), else defaults."""
    if path:
        root = Path(path).resolve()
        if not root.exists():
            console.error(f"Path does not exist: {path}")
            sys.exit(1)
        return root, load_config(root)

    root = find_project_root()
    if root is None:
        return None, ProjectConfig()
    return root, load_config(root)


def _make_tokenizer(config: ProjectConfig, backend: str | None):
    from promptweave.tokenizer import create_tokenizer

    tokenizer_config = TokenizerConfig(backend=backend) if backend else config.tokenizer
    try:
        return create_tokenizer(tokenizer_config)
    except ConfigError as e:
        console.error(str(e))
        sys.exit(1)


def _load_docs(docs_path: str) -> list[dict]:
    """Read documents from a JSON list (strings or item dicts) or a text file.

    Text files are split into one document per blank-line separated paragraph.
    """
    path = Path(docs_path)
    text = path.read_text(encoding="utf-8")

    if path.suffix.lower() == ".json":
        data = json.loads(text)
        if not isinstance(data, list):
            raise click.BadParameter("JSON docs must be a list", param_hint="--docs")
        return [{"content": d} if isinstance(d, str) else d for d in data]

    paragraphs = [p.strip() for p in text.split("\n\n")]
    return [{"content": p} for p in paragraphs if p]


def _build_pipeline(config: ProjectConfig, docs_path: str, dedupe: bool | None):
    from promptweave.context.pipeline import ContextPipeline
    from promptweave.context.sources.static import StaticSource

    source = StaticSource.from_items(_load_docs(docs_path), name=Path(docs_path).stem)
    pipeline = ContextPipeline.from_config(config.pipeline, [source])
    if dedupe is not None:
        pipeline.set_deduplicate(dedupe)
    return pipeline


@click.group()
@click.version_option(version=__version__, prog_name="promptweave")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
def main(verbose: bool):
    """promptweave - fit ranked context into a model's token budget."""
    if verbose:
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console.console, show_path=False)],
        )


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--model", default=None, help="Model to fit prompts for.")
@click.option(
    "--tokenizer",
    type=click.Choice(["tiktoken", "approximate"]),
    default=None,
    help="Tokenizer backend.",
)
def init(path: str | None, model: str | None, tokenizer: str | None):
    """Create a .promptweave/config.json for a project."""
    root = Path(path or ".").resolve()
    if not root.exists():
        console.error(f"Path does not exist: {root}")
        sys.exit(1)

    console.banner()
    console.info(f"Initializing promptweave for: {root}")

    config = load_config(root)
    config.name = root.name
    config.root_path = str(root)
    if model:
        config.composer.model = model
    if tokenizer:
        config.tokenizer.backend = tokenizer

    save_config(root, config)
    console.success("Configuration saved to .promptweave/config.json")


@main.command()
def models():
    """List known models with their context windows and encodings."""
    from promptweave.tokenizer import all_models, encoding_for

    known = all_models()
    console.show_models(known, {m: encoding_for(m) for m in known})


@main.command()
@click.argument("text", required=False)
@click.option("--file", "-f", "file_path", default=None, type=click.Path(exists=True),
              help="Count tokens in a file instead of TEXT.")
@click.option("--model", "-m", default=None, help="Model to count for.")
@click.option("--tokenizer", type=click.Choice(["tiktoken", "approximate"]), default=None,
              help="Tokenizer backend (overrides config).")
@click.option("--path", "-p", default=None, help="Path to the project root.")
def count(text: str | None, file_path: str | None, model: str | None,
          tokenizer: str | None, path: str | None):
    """Count the tokens in TEXT (or a file) for a model."""
    if text is None and file_path is None:
        console.error("Provide TEXT or --file.")
        sys.exit(1)

    _, config = _load_project_config(path)
    model = model or config.composer.model or "gpt-4"
    tok = _make_tokenizer(config, tokenizer)

    content = Path(file_path).read_text(encoding="utf-8") if file_path else text
    tokens = tok.count(content, model)
    window = tok.context_window(model)

    console.console.print(
        f"[bold]{tokens:,}[/bold] tokens for [cyan]{model}[/cyan] "
        f"({tokens / window * 100:.1f}% of {window:,})"
    )


@main.command()
@click.argument("query")
@click.option("--docs", "-d", required=True, type=click.Path(exists=True),
              help="Documents: JSON list or blank-line separated text file.")
@click.option("--limit", "-l", default=None, type=int, help="Maximum results.")
@click.option("--format", "output_format", type=click.Choice(["table", "numbered", "markdown", "json"]),
              default="table", help="Output format.")
@click.option("--no-dedupe", is_flag=True, help="Keep duplicate content.")
@click.option("--path", "-p", default=None, help="Path to the project root.")
def search(query: str, docs: str, limit: int | None, output_format: str,
           no_dedupe: bool, path: str | None):
    """Search documents through the context pipeline."""
    _, config = _load_project_config(path)
    limit = limit or config.pipeline.default_limit

    with _build_pipeline(config, docs, False if no_dedupe else None) as pipeline:
        results = pipeline.search(query, limit)

    if not results:
        console.warning(f"No results found for '{query}'")
        return

    if output_format == "table":
        console.info(f"{len(results)} result(s) for '{query}':")
        console.show_results(results)
    else:
        click.echo(results.format_for_prompt(output_format))


@main.command()
@click.option("--system", "system_prompt", default=None, help="System prompt (never shrunk).")
@click.option("--user", "user_prompt", default=None, help="User message (never shrunk).")
@click.option("--docs", "-d", default=None, type=click.Path(exists=True),
              help="Documents to retrieve context from.")
@click.option("--query", "-q", default=None, help="Retrieval query (defaults to --user).")
@click.option("--limit", "-l", default=5, help="Context items to retrieve.")
@click.option("--model", "-m", default=None, help="Model to fit for.")
@click.option("--reserve", "-r", default=None, type=int, help="Tokens reserved for output.")
@click.option("--tokenizer", type=click.Choice(["tiktoken", "approximate"]), default=None,
              help="Tokenizer backend (overrides config).")
@click.option("--messages", "as_messages", is_flag=True, help="Print chat messages as JSON.")
@click.option("--path", "-p", default=None, help="Path to the project root.")
def compose(system_prompt: str | None, user_prompt: str | None, docs: str | None,
            query: str | None, limit: int, model: str | None, reserve: int | None,
            tokenizer: str | None, as_messages: bool, path: str | None):
    """Compose a prompt from a system prompt, retrieved context and a question.

    Examples:

        promptweave compose --system "Answer briefly." --user "How do refunds work?" --docs faq.json

        promptweave compose --user "Summarise" --docs notes.txt --model gpt-4 --reserve 7000
    """
    from promptweave.composer import PromptComposer

    _, config = _load_project_config(path)
    tok = _make_tokenizer(config, tokenizer)

    composer = PromptComposer.from_config(config.composer, tokenizer=tok)
    if model:
        composer.model(model)
    if reserve is not None:
        composer.reserve_output_tokens(reserve)

    if system_prompt:
        composer.section("system", system_prompt, priority=100)
    if docs:
        pipeline = _build_pipeline(config, docs, None)
        try:
            composer.context(pipeline, priority=50, query=query or user_prompt or "",
                             limit=limit, format=config.pipeline.format)
        finally:
            pipeline.cleanup()
    if user_prompt:
        composer.section("user", user_prompt, priority=90)

    if not composer.sections:
        console.error("Nothing to compose. Provide --system, --user or --docs.")
        sys.exit(1)

    try:
        composer.fit()
    except (BudgetExceededError, ConfigError) as e:
        console.error(str(e))
        sys.exit(1)

    if as_messages:
        click.echo(json.dumps(composer.to_messages(), indent=2, ensure_ascii=False))
    else:
        click.echo(composer.to_text())

    console.show_fit_summary(
        composer.sections,
        composer.token_count(),
        composer.available_tokens(),
        composer.effective_model,
    )


@main.command("config")
@click.argument("action", type=click.Choice(["show", "get", "set"]))
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.option("--path", "-p", default=None, help="Path to the project root.")
def config_cmd(action: str, key: str | None, value: str | None, path: str | None):
    """Manage promptweave configuration."""
    root, config = _load_project_config(path)

    if action == "show":
        console.console.print_json(json.dumps(config.model_dump(), indent=2))
    elif action == "get":
        if not key:
            console.error("Usage: promptweave config get <key>")
            sys.exit(1)
        data = config.model_dump()
        for part in key.split("."):
            if isinstance(data, dict) and part in data:
                data = data[part]
            else:
                console.error(f"Unknown key: {key}")
                sys.exit(1)
        console.console.print(f"{key} = {data}")
    elif action == "set":
        if not key or value is None:
            console.error("Usage: promptweave config set <key> <value>")
            sys.exit(1)
        if root is None:
            console.error("No promptweave project found. Run 'promptweave init' first.")
            sys.exit(1)
        try:
            # Try to parse as JSON for non-string values
            try:
                parsed_value = json.loads(value)
            except json.JSONDecodeError:
                parsed_value = value

            config = set_config_value(config, key, parsed_value)
            save_config(root, config)
            console.success(f"Set {key} = {parsed_value}")
        except KeyError:
            console.error(f"Unknown config key: {key}")
            sys.exit(1)


if __name__ == "__main__":
    main()

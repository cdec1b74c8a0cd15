"""CLI entry points for Gemini Reply."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from dotenv import load_dotenv

from .config import Config
from .llm.gemini import GeminiReplyClient
from .utils.jsonl import append_transcript

logger = logging.getLogger(__name__)

EXIT_WORDS = {"exit", "quit"}


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # Per-request lines are noise in an interactive session
    logging.getLogger("httpx").setLevel(logging.WARNING)


def load_config(config: Optional[Path], model: Optional[str] = None) -> Config:
    """Load config from YAML if provided, else from the environment."""
    if config:
        cfg = Config.from_yaml(config)
    else:
        cfg = Config.from_env()

    if model is not None:
        cfg.llm.model_name = model
    return cfg


def build_client(cfg: Config) -> GeminiReplyClient:
    try:
        return GeminiReplyClient.from_config(cfg)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


config_option = click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to YAML config file",
)
model_option = click.option(
    "--model",
    "-m",
    type=str,
    default=None,
    help="Gemini model name (overrides config)",
)
transcript_option = click.option(
    "--transcript",
    "-t",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Append each exchange to this JSONL file",
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Gemini Reply - send messages to Gemini and print the replies."""
    load_dotenv()
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@main.command()
@click.argument("message")
@config_option
@model_option
@transcript_option
def ask(
    message: str,
    config: Path | None,
    model: str | None,
    transcript: Path | None,
) -> None:
    """Send a single MESSAGE and print the reply."""
    cfg = load_config(config, model)
    client = build_client(cfg)

    async def run_ask():
        async with client:
            return await client.get_reply_result(message)

    reply = asyncio.run(run_ask())
    click.echo(reply.render())

    if transcript:
        append_transcript(transcript, message, reply)

    if not reply.ok:
        sys.exit(1)


@main.command()
@config_option
@model_option
@transcript_option
def chat(
    config: Path | None,
    model: str | None,
    transcript: Path | None,
) -> None:
    """Read messages from stdin, one per line, and print a reply to each.

    Every message is sent on its own; earlier exchanges are not included.
    Type 'exit' or 'quit' (or send EOF) to stop.
    """
    cfg = load_config(config, model)
    client = build_client(cfg)
    stdin = click.get_text_stream("stdin")

    async def run_chat() -> int:
        exchanges = 0
        async with client:
            while True:
                click.echo("You: ", nl=False)
                line = await asyncio.to_thread(stdin.readline)
                if not line:
                    click.echo()
                    break

                message = line.rstrip("\n")
                if message.strip().lower() in EXIT_WORDS:
                    break

                reply = await client.get_reply_result(message)
                click.echo(f"Bot: {reply.render()}")
                exchanges += 1

                if transcript:
                    append_transcript(transcript, message, reply)
        return exchanges

    exchanges = asyncio.run(run_chat())
    logger.info(f"Chat ended after {exchanges} exchanges")


@main.command("show-config")
@config_option
@model_option
def show_config(config: Path | None, model: str | None) -> None:
    """Print the effective configuration (API key omitted)."""
    cfg = load_config(config, model)
    click.echo(yaml.dump(cfg.to_dict(), default_flow_style=False, sort_keys=False), nl=False)
    if not cfg.llm.api_key:
        click.echo("Warning: no API key found in GOOGLE_API_KEY or GEMINI_API_KEY", err=True)


if __name__ == "__main__":
    main()

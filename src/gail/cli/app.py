"""Main CLI application using Typer."""

import asyncio
import logging
from enum import Enum

import typer
from dotenv import load_dotenv
from rich.console import Console

from .. import APP_NAME
from ..assistant import Session
from ..config import (
    ASSISTANTS_FILE,
    VALIDATIONS_FILE,
    ConfigError,
    ModelChoice,
    ensure_config_files,
    load_assistants,
    load_config,
    load_validations,
)
from ..llm import BackendError, create_llm_backend
from ..log import setup_logging
from ..ui import run_gail_tui

logger = logging.getLogger(__name__)

# Create Typer app
app = typer.Typer(
    name="gail",
    help="Chat with an LLM from the terminal under a selectable role and skill",
    add_completion=False,
)

# Console for rich output
console = Console(stderr=True)


class LogLevelChoice(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


@app.command()
def run(
    model: ModelChoice = typer.Option(
        ModelChoice.GPT,
        "--model",
        "-m",
        help="Model family: gpt (Assistants), claude (Messages) or gpto (reasoning)",
        case_sensitive=False,
    ),
    log_level: LogLevelChoice = typer.Option(
        LogLevelChoice.INFO,
        "--log-level",
        "-l",
        help="Log level for the log file and the log panel",
        case_sensitive=False,
    ),
):
    """Start the chat TUI."""
    load_dotenv()

    try:
        config = load_config(model)
        log_file = setup_logging(log_level.value, config.log_dir)
        ensure_config_files(config.config_dir)
        validator = load_validations(config.config_dir / VALIDATIONS_FILE)
        registry = load_assistants(config.config_dir / ASSISTANTS_FILE)
    except ConfigError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    except OSError as e:
        console.print(f"[red]Error: failed to set up logging: {e}[/red]")
        raise typer.Exit(code=1)

    logger.info(
        "%s started, loading model %s (max tokens %d), logging to %s",
        APP_NAME, config.model_name, config.max_tokens, log_file,
    )

    async def _run():
        backend = await create_llm_backend(
            config.model.value,
            api_key=config.api_key,
            validator=validator,
            model=config.model_name,
            max_tokens=config.max_tokens,
            user=APP_NAME,
        )
        session = Session(registry, assistant_label=backend.user or APP_NAME)
        await run_gail_tui(
            backend=backend,
            session=session,
            history_dir=config.history_dir,
            highlight_style=config.highlight_style,
            highlight_color=config.highlight_color,
            editor=config.editor,
            log_level=log_level.value,
        )

    try:
        asyncio.run(_run())
    except BackendError as e:
        logger.error("Backend failure: %s", e)
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

"""Application configuration.

Hides where configuration lives and how it is read:
- Model selection and credentials come from the environment (.env supported)
- Roles, skills and validation rules come from TOML files in the user's
  config directory, seeded from the bundled defaults on first run
- Directory locations can be overridden through GAIL_* variables
"""

import logging
import os
import shutil
import sys
import tomllib
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .assistant import AssistantRegistry, Role, Skill
from .validator import InputValidator, ValidationRule

logger = logging.getLogger(__name__)

# Bundled default configuration files
_ASSETS_DIR = Path(__file__).parent / "assets"

ASSISTANTS_FILE = "assistants.toml"
VALIDATIONS_FILE = "validations.toml"

DEFAULT_EDITOR = "vim"
DEFAULT_HIGHLIGHT_STYLE = "friendly"
DEFAULT_HIGHLIGHT_COLOR = "cyan"


class ConfigError(Exception):
    """Configuration is missing, unreadable or invalid (fatal at startup)."""


class ModelChoice(str, Enum):
    """Model families selectable on the command line."""

    GPT = "gpt"
    CLAUDE = "claude"
    GPTO = "gpto"


class ModelSpec(BaseModel):
    """Concrete model behind a ModelChoice."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Remote model identifier")
    max_tokens: int = Field(gt=0, description="Maximum tokens to generate")
    api_key_env: str = Field(description="Environment variable holding the API key")


MODEL_SPECS: dict[ModelChoice, ModelSpec] = {
    ModelChoice.GPT: ModelSpec(name="gpt-4o", max_tokens=4096, api_key_env="OPENAI_API_KEY"),
    ModelChoice.CLAUDE: ModelSpec(
        name="claude-3-5-sonnet-20240620", max_tokens=4092, api_key_env="CLAUDE_API_KEY"
    ),
    ModelChoice.GPTO: ModelSpec(name="o3-mini", max_tokens=16384, api_key_env="OPENAI_API_KEY"),
}


class GailConfig(BaseModel):
    """Resolved runtime configuration."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model: ModelChoice
    model_name: str
    max_tokens: int
    api_key: str = Field(repr=False)
    config_dir: Path
    history_dir: Path
    log_dir: Path
    highlight_style: str = DEFAULT_HIGHLIGHT_STYLE
    highlight_color: str = DEFAULT_HIGHLIGHT_COLOR
    editor: str = DEFAULT_EDITOR


def _home() -> Path:
    try:
        return Path.home()
    except RuntimeError as e:
        raise ConfigError(f"Cannot get the user's home directory: {e}") from e


def default_config_dir() -> Path:
    return Path(os.getenv("GAIL_CONFIG_DIR") or _home() / ".config" / "gail")


def default_history_dir() -> Path:
    return Path(os.getenv("GAIL_HISTORY_DIR") or _home() / "gail_history")


def default_log_dir() -> Path:
    """Per-user log directory (~/Library/Logs/gail on macOS, XDG state dir elsewhere)."""
    override = os.getenv("GAIL_LOG_DIR")
    if override:
        return Path(override)
    if sys.platform == "darwin":
        return _home() / "Library" / "Logs" / "gail"
    state_home = os.getenv("XDG_STATE_HOME")
    base = Path(state_home) if state_home else _home() / ".local" / "state"
    return base / "gail"


def load_config(model: ModelChoice | str) -> GailConfig:
    """Build the runtime configuration for the selected model.

    Args:
        model: Model family ('gpt', 'claude' or 'gpto')

    Returns:
        Resolved configuration

    Raises:
        ConfigError: If the model is unsupported, its API key is not set or the
            highlight style is unknown

    Environment variables:
        OPENAI_API_KEY: API key for gpt and gpto
        CLAUDE_API_KEY: API key for claude
        EDITOR: External editor (default: vim)
        GAIL_HIGHLIGHT_STYLE: Pygments style for code blocks (default: friendly)
        GAIL_HIGHLIGHT_COLOR: Accent colour of the UI (default: cyan)
        GAIL_CONFIG_DIR, GAIL_HISTORY_DIR, GAIL_LOG_DIR: Directory overrides
    """
    try:
        choice = ModelChoice(model)
    except ValueError as e:
        supported = ", ".join(f"'{c.value}'" for c in ModelChoice)
        raise ConfigError(f"Invalid model '{model}'. Use one of [{supported}]") from e

    spec = MODEL_SPECS[choice]
    api_key = os.getenv(spec.api_key_env)
    if not api_key:
        raise ConfigError(
            f"Environment variable '{spec.api_key_env}' not set for model '{choice.value}'"
        )

    highlight_style = os.getenv("GAIL_HIGHLIGHT_STYLE") or DEFAULT_HIGHLIGHT_STYLE
    try:
        get_style_by_name(highlight_style)
    except ClassNotFound as e:
        raise ConfigError(
            f"Unknown highlight style '{highlight_style}' in GAIL_HIGHLIGHT_STYLE"
        ) from e

    return GailConfig(
        model=choice,
        model_name=spec.name,
        max_tokens=spec.max_tokens,
        api_key=api_key,
        config_dir=default_config_dir(),
        history_dir=default_history_dir(),
        log_dir=default_log_dir(),
        highlight_style=highlight_style,
        highlight_color=os.getenv("GAIL_HIGHLIGHT_COLOR", DEFAULT_HIGHLIGHT_COLOR),
        editor=os.getenv("EDITOR") or DEFAULT_EDITOR,
    )


def ensure_config_files(config_dir: Path) -> None:
    """Create config_dir and copy in the bundled defaults that are missing.

    Existing files are never overwritten.

    Raises:
        ConfigError: If the directory or a file cannot be created
    """
    try:
        config_dir.mkdir(parents=True, exist_ok=True)
        for filename in (ASSISTANTS_FILE, VALIDATIONS_FILE):
            destination = config_dir / filename
            if destination.exists():
                continue
            shutil.copyfile(_ASSETS_DIR / filename, destination)
            logger.info("Seeded default config file: %s", destination)
    except OSError as e:
        raise ConfigError(f"Failed to prepare config directory '{config_dir}': {e}") from e


def _read_toml(path: Path) -> dict:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"Failed to read the '{path.name}' config file: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse the '{path.name}' config file: {e}") from e


def load_assistants(path: Path) -> AssistantRegistry:
    """Load roles ([[role]]) and skills ([[skill]]) from a TOML file.

    Raises:
        ConfigError: If the file cannot be read or an entry is invalid
    """
    data = _read_toml(path)
    try:
        roles = [Role.model_validate(entry) for entry in data.get("role", [])]
        skills = [Skill.model_validate(entry) for entry in data.get("skill", [])]
    except ValidationError as e:
        raise ConfigError(f"Invalid entry in the '{path.name}' config file: {e}") from e

    logger.info("Loaded %d roles and %d skills from %s", len(roles), len(skills), path)
    return AssistantRegistry(roles, skills)


def load_validations(path: Path) -> InputValidator:
    """Load validation rules ([[validation]]) from a TOML file, keeping file order.

    Raises:
        ConfigError: If the file cannot be read, an entry is invalid or a
            pattern does not compile
    """
    data = _read_toml(path)
    try:
        rules = [ValidationRule.model_validate(entry) for entry in data.get("validation", [])]
        validator = InputValidator(rules)
    except (ValidationError, ValueError) as e:
        raise ConfigError(f"Invalid entry in the '{path.name}' config file: {e}") from e

    logger.info("Loaded %d validation rules from %s", len(rules), path)
    return validator

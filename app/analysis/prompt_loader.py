from pathlib import Path

from app.analysis.exceptions import AnalysisError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(path: Path | None = None) -> str:
    """Load the analysis prompt template from a file.

    Args:
        path: Path to the prompt template file.
              Defaults to the bundled analysis_prompt.txt.

    Returns:
        The raw template string with placeholders.

    Raises:
        AnalysisError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "analysis_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise AnalysisError(f"Failed to load prompt template: {exc}") from exc


def load_json_schema(path: Path | None = None) -> str:
    """Load the response JSON schema, defaulting to analysis_schema.json."""
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "analysis_schema.json"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise AnalysisError(f"Failed to load JSON schema: {exc}") from exc


def load_system_prompt(path: Path | None = None) -> str:
    """Load the system message sent ahead of every analysis request.

    Raises:
        AnalysisError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "analysis_system_prompt.txt"
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise AnalysisError(f"Failed to load system prompt: {exc}") from exc

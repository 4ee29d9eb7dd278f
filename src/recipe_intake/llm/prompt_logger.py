"""
Recipe Intake - Prompt Logger.

Logs model prompts and responses to files for debugging.
Enabled via INTAKE_LOG_PROMPTS=1 or the --log-prompts CLI flag.
Image payloads are never written; only their count is recorded.
"""

from datetime import datetime
from pathlib import Path

from recipe_intake.config import settings

LOG_DIR = Path("prompt_logs")

# Explicit override from enable_prompt_logging(); None defers to settings
_enabled: bool | None = None
_session_id: str | None = None
_call_counter: int = 0


def enable_prompt_logging(enabled: bool = True) -> None:
    """Enable or disable prompt logging."""
    global _enabled
    _enabled = enabled
    if enabled:
        LOG_DIR.mkdir(exist_ok=True)


def is_enabled() -> bool:
    if _enabled is not None:
        return _enabled
    return settings.intake_log_prompts


def _get_session_dir() -> Path:
    global _session_id
    if _session_id is None:
        _session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
    session_dir = LOG_DIR / _session_id
    session_dir.mkdir(parents=True, exist_ok=True)
    return session_dir


def log_prompt(
    *,
    stage: str,
    model: str,
    prompt: str,
    image_count: int = 0,
    response: str | None = None,
    error: str | None = None,
) -> Path | None:
    """
    Log a model call to a markdown file.

    Args:
        stage: Pipeline stage (extraction, alt_text, image)
        model: Model name
        prompt: Text portion of the request
        image_count: Number of images attached to the request
        response: Raw text response, if any
        error: Error message, if the call failed

    Returns:
        Path to the log file, or None if logging is disabled
    """
    if not is_enabled():
        return None

    global _call_counter
    _call_counter += 1

    filepath = _get_session_dir() / f"{_call_counter:02d}_{stage}.md"

    content = f"""# Model Call: {stage}

**Time:** {datetime.now().isoformat()}
**Model:** {model}
**Images attached:** {image_count}

---

## Prompt

```
{prompt}
```

---

## Response

"""
    if error:
        content += f"**ERROR:** {error}\n"
    elif response:
        content += f"```\n{response}\n```\n"
    else:
        content += "(No response)\n"

    filepath.write_text(content, encoding="utf-8")
    return filepath


def get_session_log_dir() -> Path | None:
    """Get the current session's log directory, if logging is enabled."""
    if not is_enabled():
        return None
    return _get_session_dir()


def reset_session() -> None:
    """Reset the session and any explicit override (for testing)."""
    global _enabled, _session_id, _call_counter
    _enabled = None
    _session_id = None
    _call_counter = 0

import os
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional

DEFAULT_RENDER_LOG = "render.log"
_render_log_lock = threading.Lock()


def get_render_log_path() -> Path:
    return Path(os.getenv("BRACEVIEW_LOG", DEFAULT_RENDER_LOG)).expanduser()


def reset_render_log() -> None:
    with _render_log_lock:
        get_render_log_path().write_text("", encoding="utf-8")


def log_render_event(status: str, view: str, source: str, detail: Optional[str] = None) -> None:
    timestamp = datetime.now().isoformat(timespec="seconds")
    message = detail.strip() if detail else ""
    line = f"{timestamp}\t{status.upper()}\t{view}\t{source}"
    if message:
        line = f"{line}\t{message}"
    with _render_log_lock:
        with get_render_log_path().open("a", encoding="utf-8") as log:
            log.write(line + "\n")

from __future__ import annotations

import logging
import shutil
import subprocess

from .errors import RenderError

logger = logging.getLogger(__name__)

# ============================================================================
# Graphviz bridge — pipes DOT text through the external `dot` binary
# ============================================================================

OUTPUT_FORMATS = ("svg", "png", "pdf")

DEFAULT_TIMEOUT = 30.0

# Longest stderr excerpt carried into a RenderError
MAX_DETAIL = 240


def find_dot(binary: str | None = None) -> str:
    """Absolute path of the Graphviz `dot` executable."""
    name = binary or "dot"
    path = shutil.which(name)
    if not path:
        raise RenderError(f'Graphviz executable "{name}" was not found on PATH')
    return path


def run_dot(
    dot_text: str,
    fmt: str = "svg",
    *,
    binary: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> bytes:
    """Render DOT text to an image with `dot -T<fmt>` and return its bytes."""
    if fmt not in OUTPUT_FORMATS:
        raise RenderError(f'Unsupported output format "{fmt}". Use one of: {", ".join(OUTPUT_FORMATS)}')

    command = [find_dot(binary), f"-T{fmt}"]
    logger.debug("running %s", " ".join(command))
    try:
        proc = subprocess.run(
            command,
            input=dot_text.encode("utf-8"),
            capture_output=True,
            check=False,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        raise RenderError(f"Graphviz timed out after {timeout:g}s") from exc
    except OSError as exc:
        raise RenderError(f"Failed to execute Graphviz: {exc}") from exc

    if proc.returncode != 0:
        detail = proc.stderr.decode("utf-8", errors="replace").strip()
        if len(detail) > MAX_DETAIL:
            detail = detail[:MAX_DETAIL] + "..."
        raise RenderError(f"Graphviz exited with status {proc.returncode}: {detail or 'unknown error'}")
    return proc.stdout

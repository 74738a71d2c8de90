"""wrapview CLI entry point.

Allows running via `python -m wrapview` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import importlib.metadata
import logging
import os
import sys

from .constants import ViewerConstants

logger = logging.getLogger(__name__)


def get_version_string() -> str:
    try:
        return importlib.metadata.version("wrapview")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def configure_logging() -> None:
    """Log to the file named by WRAPVIEW_LOG, if set.

    The screen belongs to the viewer, so nothing is logged to stderr.
    """
    log_path = os.environ.get(ViewerConstants.LOG_ENV_VAR)
    if not log_path:
        return
    handler = logging.FileHandler(log_path, encoding='utf-8')
    handler.setFormatter(logging.Formatter(ViewerConstants.LOG_FORMAT))
    root = logging.getLogger("wrapview")
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)


def main(argv: list[str] | None = None) -> int:
    # Very small arg parsing: version flag or a single file path
    args = sys.argv[1:] if argv is None else argv
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return 0
    if len(args) != 1:
        print(ViewerConstants.USAGE_MESSAGE, file=sys.stderr)
        return 2

    configure_logging()

    # Lazy import to avoid importing UI deps for --version
    from .document import DocumentDecodeError
    from .layout import LayoutError
    from .viewer import Viewer

    viewer = Viewer()
    try:
        viewer.load_file(args[0])
        viewer.run()
    except LayoutError:
        # Internal error: log the traceback before it propagates
        logger.exception("Layout invariant violated")
        raise
    except (DocumentDecodeError, OSError) as e:
        logger.error("Exiting: %s", e)
        print(f"wrapview: error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

"""Constants and configuration for the wrapview viewer."""

class ViewerConstants:
    """Central configuration constants for the viewer."""

    # Layout
    SENTINEL_WIDTH = 1  # Columns taken by end-of-line and terminator cells
    LINE_SEPARATOR = b"\r\n"  # Moves the terminal to column 0 of the next row

    # Signal self-pipe
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize
    INTERRUPT_PIPE_MARKER = b'C'  # Byte written to pipe on SIGINT (Ctrl-C)

    # File operations
    ATOMIC_SAVE_PREFIX = "."  # Prefix for temporary save files
    ATOMIC_SAVE_SUFFIX = ".tmp"  # Suffix for temporary save files

    # Logging
    LOG_ENV_VAR = "WRAPVIEW_LOG"  # Path of a log file; logging is off when unset
    LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    # Status messages
    USAGE_MESSAGE = "usage: wrapview [-V | --version] PATH"

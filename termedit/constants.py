"""Constants and configuration for the termedit editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    # Screen layout
    CHROME_ROWS = 2  # Status bar + message bar reserved at the bottom
    MODIFIED_FLAG = "[+] "  # Status bar prefix for a modified buffer

    # Event loop timing
    EVENT_TIMEOUT = 1.0  # Seconds next_event() waits before returning Empty
    JOIN_TIMEOUT = 1.0  # Seconds shutdown waits for each producer thread

    # Key bindings (control combinations)
    SAVE_KEY = 's'
    EXIT_KEY = 'q'

    # File operations
    ATOMIC_SAVE_PREFIX = "."  # Prefix for temporary save files
    ATOMIC_SAVE_SUFFIX = ".tmp"  # Suffix for temporary save files

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize
    CLOSE_PIPE_MARKER = b'X'  # Byte written to pipe when the handle is revoked

    # Default render settings
    HELP_TEXT = "CTRL-Q = exit | CTRL-S = save"
    STATUS_BG_COLOR = (239, 239, 239)
    STATUS_FG_COLOR = (63, 63, 63)

    # Status messages
    SAVED_MESSAGE = "Saved to {}"
    SAVE_ERROR_MESSAGE = "Error: Cannot save to {}"
    PERMISSION_ERROR_MESSAGE = "Error: Permission denied saving {}"
    NO_SPACE_MESSAGE = "Error: No space left on device"

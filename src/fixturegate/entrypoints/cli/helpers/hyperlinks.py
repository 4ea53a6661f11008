"""OSC-8 hyperlink utilities for the fixturegate CLI.

Detects whether the active text stream supports OSC-8 terminal hyperlinks and
renders URLs as clickable links, falling back to plain text otherwise.
"""

import os
import sys
from typing import TextIO

OSC8_TERMINALS = {"apple_terminal", "vscode", "iterm.app", "wezterm", "kitty"}


def supports_osc8(stream: TextIO | None = None) -> bool:
    """Heuristically detect whether the target stream supports OSC-8 hyperlinks.

    Args:
        stream: Text stream to probe; defaults to ``sys.stdout``.

    Returns:
        bool: ``False`` for non-TTY streams, otherwise whether the terminal is
        on a conservative allowlist.
    """
    stream = stream or sys.stdout
    if not getattr(stream, "isatty", lambda: False)():
        return False
    return bool(
        (os.getenv("TERM_PROGRAM") or "").lower() in OSC8_TERMINALS
        or os.getenv("WT_SESSION")  # Windows Terminal
        or os.getenv("VTE_VERSION")  # GNOME Terminal, Tilix, etc.
        or os.getenv("TERM", "").startswith(("alacritty", "konsole"))
    )


def hyperlink(url: str, label: str | None = None) -> str:
    """Return an OSC-8 hyperlink, or plain text on unsupported terminals.

    Args:
        url: Target URL.
        label: Visible text; defaults to the URL itself.
    """
    label = label or url
    if not supports_osc8():
        return label if label == url else f"{label} ({url})"
    return f"\x1b]8;;{url}\x07{label}\x1b]8;;\x07"  # OSC 8 ; ; URL BEL

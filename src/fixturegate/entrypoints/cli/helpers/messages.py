"""Terminal message helpers for the fixturegate CLI.

Small helpers for rendering user-visible lines with emoji→ASCII fallbacks.
Messages write to stderr so stdout stays machine-readable (e.g. ``--json``).
"""

import click

WARNING_GLYPHS = ("⚠️", "[!]")  # pragma: no mutate
SUCCESS_GLYPHS = ("✅", "[OK]")  # pragma: no mutate
ERROR_GLYPHS = ("❌", "[X]")  # pragma: no mutate
INFO_GLYPHS = ("ℹ️", "[i]")  # pragma: no mutate


def _supports_character(character: str) -> bool:
    """Return True if *character* can be encoded on stderr."""
    stream = click.get_text_stream("stderr")  # pragma: no mutate
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def glyph(glyphs: tuple[str, str]) -> str:
    """Pick the emoji of an (emoji, fallback) pair when stderr can encode it.

    Args:
        glyphs: The emoji and its ASCII fallback.

    Returns:
        str: The emoji, or the fallback on terminals that cannot encode it.
    """
    emoji, fallback = glyphs
    return emoji if _supports_character(emoji) else fallback


def warn(msg: str) -> None:
    """Emit a yellow, bold warning line to **stderr**.

    Example:
        ``⚠️  NEW_RELIC_LICENSE_KEY must be set for acceptance tests``
    """
    click.secho(f"{glyph(WARNING_GLYPHS)}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Emit a green, bold success line to **stderr**.

    Example:
        ``✅  Application 'tf_test_abcdefghij' is ready.``
    """
    click.secho(f"{glyph(SUCCESS_GLYPHS)}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Emit a red, bold error line to **stderr**."""
    click.secho(f"{glyph(ERROR_GLYPHS)}  {msg}", fg="red", bold=True, err=True)


def info(msg: str) -> None:
    """Emit a plain informational line to **stderr**."""
    click.secho(f"{glyph(INFO_GLYPHS)}  {msg}", err=True)

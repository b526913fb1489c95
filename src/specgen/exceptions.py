"""Exception hierarchy for specgen.

All exceptions inherit from :class:`SpecgenError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specgen.exit_codes`.
The top-level error handler in :func:`specgen.app.main` catches
``SpecgenError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    SpecgenError (exit 1)
    +-- ConfigReadError          (exit 3)
    +-- PathResolutionError      (exit 4)
    +-- DefaultsResolutionError  (exit 5)
    +-- OverlayDecodeError       (exit 6)
    +-- GenerationError          (exit 7)
    +-- DocumentLoadError        (exit 1)
"""

from specgen.exit_codes import (
    EXIT_CONFIG_READ,
    EXIT_DEFAULTS_RESOLUTION,
    EXIT_GENERATION_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_OVERLAY_DECODE,
    EXIT_PATH_RESOLUTION,
)


class SpecgenError(Exception):
    """Base exception for all specgen errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specgen.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigReadError(SpecgenError):
    """Raised when the override config file is missing, unreadable or malformed."""

    exit_code = EXIT_CONFIG_READ


class PathResolutionError(SpecgenError):
    """Raised when an absolute or relative path cannot be computed."""

    exit_code = EXIT_PATH_RESOLUTION


class DefaultsResolutionError(SpecgenError):
    """Raised when a required default cannot be derived (e.g. unreadable spec)."""

    exit_code = EXIT_DEFAULTS_RESOLUTION


class OverlayDecodeError(SpecgenError):
    """Raised when a config document cannot be mapped onto a language definition."""

    exit_code = EXIT_OVERLAY_DECODE


class GenerationError(SpecgenError):
    """Raised by generation engines for any failure while generating code.

    The invoker never inspects or rewraps this error; it reaches the caller
    exactly as the engine raised it.
    """

    exit_code = EXIT_GENERATION_FAILURE


class DocumentLoadError(SpecgenError):
    """Raised by :mod:`specgen.loader` when a JSON/YAML document cannot be loaded.

    Callers translate it into the stage-specific error
    (:class:`ConfigReadError` or :class:`DefaultsResolutionError`).
    """

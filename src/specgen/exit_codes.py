"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific failure stage of ``generate server`` and is
referenced by the corresponding :class:`~specgen.exceptions.SpecgenError`
subclass. Shell wrappers and CI scripts can inspect the exit code to tell
which stage failed without parsing stderr.

Invalid arguments are rejected by Typer itself with exit code 2.

Example::

    $ specgen generate server -C missing.yaml
    $ echo $?
    3   # EXIT_CONFIG_READ -- the overlay file could not be read
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_CONFIG_READ = 3
"""The configuration overlay file was missing, unreadable or malformed."""

EXIT_PATH_RESOLUTION = 4
"""An absolute or relative path could not be computed."""

EXIT_DEFAULTS_RESOLUTION = 5
"""A required default (e.g. the application name) could not be derived."""

EXIT_OVERLAY_DECODE = 6
"""The configuration document did not match the overlay structure."""

EXIT_GENERATION_FAILURE = 7
"""The generation engine reported a failure."""

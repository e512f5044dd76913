"""Lookup of reporters registered under the `spec_engine.reporters` entry points."""

from importlib.metadata import entry_points
from typing import Any

from spec_engine.reporters.manifest import ReporterManifest

ENTRY_POINT_GROUP = "spec_engine.reporters"


class ReporterNotFoundError(Exception):
    """Raised when no reporter is registered under the requested key."""


def load_reporter_manifest(key: str) -> ReporterManifest[Any]:
    """Load the manifest of the reporter registered under `key`.

    The package itself registers "recording", "logging" and "json"; other
    distributions add reporters by declaring entry points in the same group.

    Raises:
        ReporterNotFoundError: If no reporter is registered under `key`.

    """
    entries = entry_points(group=ENTRY_POINT_GROUP)

    if key in entries.names:
        manifest: ReporterManifest[Any] = entries[key].load()
        return manifest

    # Entry points are listed in installation order, which differs between
    # environments; the message lists them alphabetically.
    available = sorted(entries.names)
    raise ReporterNotFoundError(
        f"Reporter {key!r} not found. Available reporters: {available}"
    )

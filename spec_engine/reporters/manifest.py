"""Reporter manifest definition for the plugin system."""

from collections.abc import Callable
from dataclasses import dataclass

from spec_engine.reporters.base import Reporter


@dataclass(frozen=True, kw_only=True)
class ReporterManifest[ReporterT: Reporter]:
    """Manifest describing a reporter plugin.

    The manifest holds the factory used to create the reporter lazily once
    the CLI has looked it up by key.
    """

    description: str
    reporter_factory: Callable[[], ReporterT]

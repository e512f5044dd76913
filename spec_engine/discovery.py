"""Discovery of suite classes from import targets."""

import importlib
import logging
from collections.abc import Sequence

from spec_engine.styles import STYLE_BASES
from spec_engine.suite import Suite

log = logging.getLogger(__name__)


class SuiteNotFoundError(Exception):
    """Raised when a target names no importable suite."""


def _is_concrete_suite(obj: object, module_name: str) -> bool:
    return (
        isinstance(obj, type)
        and issubclass(obj, Suite)
        and obj is not Suite
        and obj not in STYLE_BASES
        and obj.__module__ == module_name
    )


def find_suites(target: str) -> Sequence[type[Suite]]:
    """Return the suite classes named by `target`.

    Args:
        target: Either `package.module`, for every suite class defined in
                that module in definition order, or `package.module:Name`
                for one class.

    Raises:
        SuiteNotFoundError: If the module cannot be imported, the named
            class does not exist or is not a suite, or the module defines
            no suites.

    """
    module_name, _, class_name = target.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError as e:
        raise SuiteNotFoundError(f"Cannot import module '{module_name}'") from e

    if class_name:
        obj = getattr(module, class_name, None)
        if not (isinstance(obj, type) and issubclass(obj, Suite)):
            raise SuiteNotFoundError(
                f"'{class_name}' in module '{module_name}' is not a suite"
            )
        return (obj,)

    suites = tuple(
        obj
        for obj in vars(module).values()
        if _is_concrete_suite(obj, module.__name__)
    )
    if not suites:
        raise SuiteNotFoundError(f"Module '{module_name}' defines no suites")

    log.debug("Found %d suite(s) in %s", len(suites), module_name)
    return suites

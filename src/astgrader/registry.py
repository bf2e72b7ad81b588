"""
Ordered rubric of checks for an assignment.
"""

from dataclasses import dataclass
import logging
import re
from typing import Iterable, Iterator, List, Optional

from astgrader.base_check import BaseCheck, Category
from astgrader.checks import CHECK_CATALOG
from astgrader.errors import ConfigurationError

# Settings
DEFAULT_MANDATORY = True
DEFAULT_MAX_SCORE = 1.0
DEFAULT_SKIP = False

logger = logging.getLogger(__name__)

def check_slug(check_name: str) -> str:
    """Lowercase, hyphenated form of a check name used in result keys

    `FunctionArgumentsUsage` and `function_arguments_usage` both become
    `function-arguments-usage`.
    """
    slug = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "-", check_name)
    return re.sub(r"[^A-Za-z0-9]+", "-", slug).strip("-").lower()

@dataclass(frozen=True)
class RubricEntry:
    """A check together with its grading metadata

    Args:
        check (BaseCheck): The check to run.
        mandatory (bool): Whether failing this check blocks acceptance.
        max_score (float): Score awarded when the check passes.
    """
    check: BaseCheck
    mandatory: bool = DEFAULT_MANDATORY
    max_score: float = DEFAULT_MAX_SCORE

    @property
    def name(self) -> str:
        return self.check.name

class CheckRegistry:
    """Ordered, validated collection of rubric entries

    The order of the entries is the order of the report. Any invalid entry
    raises `ConfigurationError` at construction time.
    """

    def __init__(self, entries: Iterable[RubricEntry]):
        """Initialize and validate the registry

        Args:
            entries (Iterable[RubricEntry]): Entries in rubric order.

        Raises:
            ConfigurationError: If an entry is malformed or two entries share
                a name, or names that map to the same result key.
        """
        self._entries = tuple(entries)
        seen = {}
        for entry in self._entries:
            self._validate(entry)
            if entry.name in seen.values():
                raise ConfigurationError(f"Duplicate check name: '{entry.name}'")
            slug = check_slug(entry.name)
            if slug in seen:
                raise ConfigurationError(
                    f"Check names '{seen[slug]}' and '{entry.name}' map to the same "
                    f"result key '{slug}'"
                )
            seen[slug] = entry.name
        logger.debug(f"Registry built with checks: {self.names}")

    @property
    def names(self) -> List[str]:
        """Get the check names in rubric order"""
        return [entry.name for entry in self._entries]

    def __iter__(self) -> Iterator[RubricEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def _validate(entry: RubricEntry) -> None:
        if not isinstance(entry, RubricEntry):
            raise ConfigurationError(f"Not a rubric entry: {entry!r}")
        check = entry.check
        if not isinstance(check, BaseCheck):
            raise ConfigurationError(f"{check!r} is not a BaseCheck instance")
        if not isinstance(check.name, str) or not check.name:
            raise ConfigurationError(f"{type(check).__name__} has no name")
        if not check_slug(check.name):
            raise ConfigurationError(
                f"Check name '{check.name}' has no letters or digits to build a result key from"
            )
        if not isinstance(check.category, Category):
            raise ConfigurationError(
                f"Check '{check.name}' has an invalid category: {check.category!r}"
            )
        if not isinstance(entry.mandatory, bool):
            raise ConfigurationError(
                f"Check '{check.name}' has a non-boolean mandatory flag: {entry.mandatory!r}"
            )
        max_score = entry.max_score
        if isinstance(max_score, bool) or not isinstance(max_score, (int, float)) or max_score <= 0:
            raise ConfigurationError(
                f"Check '{check.name}' has an invalid max score: {max_score!r}"
            )

    @classmethod
    def from_config(
        cls,
        checks_config: list,
        check_logger: Optional[logging.Logger] = None,
    ) -> "CheckRegistry":
        """Build a registry from the `checks` section of a configuration file

        Each item is a single-key mapping from a catalog check name to its
        settings (`mandatory`, `max_score`, `skip`).

        Args:
            checks_config (list): The `checks` list from the configuration.
            check_logger (logging.Logger, optional): Logger handed to each check.

        Returns:
            CheckRegistry: The validated registry.

        Raises:
            ConfigurationError: If the section is malformed or names an
                unknown check.
        """
        if not isinstance(checks_config, list) or not checks_config:
            raise ConfigurationError("No checks specified in configuration")

        entries = []
        for item in checks_config:

            # Accept a bare name as shorthand for default settings
            if isinstance(item, str):
                item = {item: {}}
            if not isinstance(item, dict) or len(item) != 1:
                raise ConfigurationError(f"Malformed check entry: {item!r}")

            check_name = next(iter(item))
            check_config = item[check_name] or {}
            if not isinstance(check_config, dict):
                raise ConfigurationError(f"Settings for check '{check_name}' must be a mapping")
            if check_config.get("skip", DEFAULT_SKIP):
                logger.info(f"Skipping check: {check_name}")
                continue

            check_class = CHECK_CATALOG.get(check_name)
            if check_class is None:
                raise ConfigurationError(f"Unknown check: '{check_name}'")

            entries.append(
                RubricEntry(
                    check=check_class(logger=check_logger),
                    mandatory=check_config.get("mandatory", DEFAULT_MANDATORY),
                    max_score=check_config.get("max_score", DEFAULT_MAX_SCORE),
                )
            )

        return cls(entries)

def default_registry(logger: Optional[logging.Logger] = None) -> CheckRegistry:
    """Build the reference rubric: every catalog check, mandatory, worth 1 point"""
    return CheckRegistry(
        RubricEntry(check=check_class(logger=logger)) for check_class in CHECK_CATALOG.values()
    )

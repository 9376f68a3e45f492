"""Repository for loading the ordered relationship rule table."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property, lru_cache
import logging
from pathlib import Path

from dep_pipeline.models import Rule
from dep_pipeline.rules.parser import parse_rule_lines

logger = logging.getLogger(__name__)

DEFAULT_RULES_PATH = Path(__file__).resolve().parent.parent / "data" / "relationships.tsv"


@dataclass(frozen=True)
class RuleRepository:
    """Read-only, path-scoped view of a rule table file.

    The file is parsed once on first access. Rule order is kept exactly as written
    because the matcher stops at the first satisfied rule.
    """

    path: Path

    @cached_property
    def rules(self) -> tuple[Rule, ...]:
        """Load and cache rules from disk.

        Returns:
            Immutable tuple of rules in priority order.

        Raises:
            FileNotFoundError: If the configured rule file does not exist.
        """

        if not self.path.exists():
            raise FileNotFoundError(f"Rule table not found: {self.path}")

        with self.path.open("r", encoding="utf-8") as handle:
            parsed = parse_rule_lines(handle)

        logger.debug("Loaded %d rules from %s", len(parsed), self.path)
        return tuple(parsed)

    @cached_property
    def labels(self) -> frozenset[str]:
        """Return every label the table can assign."""

        return frozenset(rule.label for rule in self.rules)


@lru_cache(maxsize=None)
def default_rule_repository() -> RuleRepository:
    """Return the shared repository for the packaged rule table."""

    return RuleRepository(DEFAULT_RULES_PATH)

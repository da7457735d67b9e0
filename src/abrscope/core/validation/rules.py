"""
Rule registry shared by the HLS and DASH standards validators.

A rule is a pure function over a ``RuleContext`` returning ``None``, one
``ValidationIssue`` or a list of them. Rules are registered on a
``RuleCatalog`` together with the issue codes they can emit, so the catalog
doubles as the ``checked_rules`` coverage list.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple, Union

from abrscope.core.models import ParsedManifest, ValidationIssue

logger = logging.getLogger(__name__)

RuleOutput = Union[None, ValidationIssue, Iterable[ValidationIssue]]


@dataclass(frozen=True)
class RuleContext:
    content: str
    playlist_type: str
    manifest: Optional[ParsedManifest] = None


@dataclass(frozen=True)
class Rule:
    name: str
    codes: Tuple[str, ...]
    check: Callable[[RuleContext], RuleOutput]

    def __call__(self, context: RuleContext) -> List[ValidationIssue]:
        result = self.check(context)
        if result is None:
            return []
        if isinstance(result, ValidationIssue):
            return [result]
        return list(result)


class RuleCatalog:
    def __init__(self, name: str):
        self.name = name
        self._rules: List[Rule] = []

    def rule(self, *codes: str):
        """Decorator registering a rule function under the codes it emits."""
        def register(func):
            self._rules.append(Rule(name=func.__name__, codes=codes, check=func))
            return func
        return register

    @property
    def rules(self) -> List[Rule]:
        return list(self._rules)

    @property
    def codes(self) -> List[str]:
        seen = []
        for rule in self._rules:
            for code in rule.codes:
                if code not in seen:
                    seen.append(code)
        return seen

    def get(self, name: str) -> Rule:
        for rule in self._rules:
            if rule.name == name:
                return rule
        raise KeyError(name)

    def run(self, context: RuleContext) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        for rule in self._rules:
            found = rule(context)
            if found:
                logger.debug(f"[{self.name}] {rule.name}: {len(found)} issue(s)")
            issues.extend(found)
        return issues

    def __len__(self):
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules)


def line_at(content: str, offset: int) -> int:
    """1-based line number of ``offset``."""
    return content.count("\n", 0, offset) + 1

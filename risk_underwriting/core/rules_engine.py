"""
Ordered condition -> action rules engine.

Every matching rule fires (not first-match-wins), in ascending priority and
then declaration order, so later rules see what earlier rules wrote to the
decision. Working state lives in a per-evaluation session that is discarded
once the rules have run.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Sequence

from risk_underwriting.pipeline.models import RiskProfile, UnderwritingDecision


logger = logging.getLogger(__name__)

Condition = Callable[[RiskProfile, UnderwritingDecision], bool]
Action = Callable[[RiskProfile, UnderwritingDecision], None]


class RuleSetError(Exception):
    """Raised when a rule set cannot be loaded. Fatal at startup."""


@dataclass(frozen=True)
class Rule:
    """A single declarative rule."""
    name: str
    condition: Condition
    action: Action
    priority: int = 100
    description: str = ""


@dataclass
class RuleSession:
    """Working memory for one evaluation."""
    profile: RiskProfile
    decision: UnderwritingDecision
    fired: List[str] = field(default_factory=list)

    def run(self, rules: Sequence[Rule]) -> None:
        for rule in rules:
            if rule.condition(self.profile, self.decision):
                rule.action(self.profile, self.decision)
                self.fired.append(rule.name)
                logger.debug(f"Rule fired: {rule.name}")

    def dispose(self) -> None:
        self.fired = []


class RuleEvaluator:
    """
    Applies an ordered rule list to a (profile, decision) pair.
    Leaves ``decision.outcome`` unset when no rule decided the case.
    """

    def __init__(self, rules: Sequence[Rule], name: str = "ad-hoc"):
        """
        Validate and order the rules.

        Args:
            rules: Rules in declaration order
            name: Rule set name, used in log lines

        Raises:
            RuleSetError: Duplicate rule names or non-callable parts
        """
        self.name = name
        _validate_rules(rules)
        # sorted() is stable, so equal priorities keep declaration order
        self.rules = tuple(sorted(rules, key=lambda rule: rule.priority))

    @contextmanager
    def _session(
        self,
        profile: RiskProfile,
        decision: UnderwritingDecision
    ) -> Iterator[RuleSession]:
        session = RuleSession(profile=profile, decision=decision)
        try:
            yield session
        finally:
            session.dispose()

    def fire_all(
        self,
        profile: RiskProfile,
        decision: UnderwritingDecision
    ) -> List[str]:
        """
        Run every matching rule against the decision.

        Returns:
            Names of the rules that fired, in firing order
        """
        with self._session(profile, decision) as session:
            session.run(self.rules)
            fired = list(session.fired)
        return fired

    def evaluate(self, profile: RiskProfile, decision: UnderwritingDecision) -> None:
        """Mutate ``decision`` in place with the rule set."""
        fired = self.fire_all(profile, decision)
        logger.info(f"Rule set '{self.name}' fired {len(fired)} rule(s)")


def _validate_rules(rules: Sequence[Rule]) -> None:
    seen = set()
    for rule in rules:
        if not rule.name:
            raise RuleSetError("Rule without a name")
        if rule.name in seen:
            raise RuleSetError(f"Duplicate rule name: {rule.name}")
        if not callable(rule.condition) or not callable(rule.action):
            raise RuleSetError(f"Rule {rule.name} has a non-callable condition or action")
        seen.add(rule.name)


def load_ruleset(
    name: str,
    registry: Optional[Dict[str, Sequence[Rule]]] = None
) -> RuleEvaluator:
    """
    Build an evaluator for a named rule set.

    Args:
        name: Rule set name (e.g. "underwriting-rules")
        registry: Name -> rules mapping (defaults to the packaged rule sets)

    Raises:
        RuleSetError: Unknown name or invalid rules
    """
    if registry is None:
        from risk_underwriting.rules import RULESETS
        registry = RULESETS

    if name not in registry:
        raise RuleSetError(f"Unknown rule set: {name}")

    logger.info(f"Loading rule set '{name}'")
    return RuleEvaluator(registry[name], name=name)

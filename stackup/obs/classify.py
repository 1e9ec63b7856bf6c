"""
Build failure classification.

Maps captured docker compose output to a BuildError kind using ordered regex
rules, so the mapping can be tested without spawning a process.
"""

import re
from typing import List, Optional
from dataclasses import dataclass, field

from ..errors import BuildError


@dataclass
class FailureRule:
    """A rule for detecting a specific build failure signature."""
    id: str
    kind: str
    regexes: List[str]
    message: str
    hint: str
    _compiled: List[re.Pattern] = field(default_factory=list, repr=False, compare=False)

    def __post_init__(self):
        self._compiled = [re.compile(r, re.IGNORECASE) for r in self.regexes]

    def matches(self, text: str) -> bool:
        return any(p.search(text) for p in self._compiled)


DEFAULT_RULES: List[FailureRule] = [
    FailureRule(
        id="address_in_use",
        kind=BuildError.PORT_CONFLICT,
        regexes=[
            r'port is already allocated',
            r'address already in use',
            r'EADDRINUSE',
            r'Bind for [\d.:\[\]]+:\d+ failed',
            r'Port \d+ is already in use',
        ],
        message="A published port is already in use",
        hint="Stop whatever is bound to the port (another deployment?) and retry",
    ),
    FailureRule(
        id="runtime_unavailable",
        kind=BuildError.RUNTIME_UNAVAILABLE,
        regexes=[
            r'Cannot connect to the Docker daemon',
            r'Is the docker daemon running',
            r'docker: command not found',
            r'docker: not found',
            r'Container runtime not found',
            r'error during connect',
            r'permission denied while trying to connect to the Docker daemon',
            r"unknown (shorthand flag|command).*compose|'compose' is not a docker command",
        ],
        message="Container runtime is not available",
        hint="Install Docker with the compose plugin and make sure the daemon is running",
    ),
]


class FailureClassifier:
    """Classifies build output using ordered regex rules; first match wins."""

    def __init__(self, rules: Optional[List[FailureRule]] = None):
        self.rules = list(rules) if rules is not None else list(DEFAULT_RULES)

    def classify_message(self, text: str) -> Optional[FailureRule]:
        """Return the first rule whose signature appears in text."""
        for rule in self.rules:
            if rule.matches(text):
                return rule
        return None

    def classify(self, output: str) -> str:
        """Map output to a BuildError kind; unmatched output is "other"."""
        rule = self.classify_message(output)
        return rule.kind if rule else BuildError.OTHER

    def to_error(self, output: str) -> BuildError:
        rule = self.classify_message(output)
        if rule is None:
            return BuildError("Build failed", kind=BuildError.OTHER, output=output)
        return BuildError(f"{rule.message}. {rule.hint}", kind=rule.kind, output=output)

    def add_custom_rule(self, rule: FailureRule):
        """Add a custom failure detection rule (evaluated last)."""
        self.rules.append(rule)


_default_classifier = FailureClassifier()


def classify_build_output(output: str) -> str:
    return _default_classifier.classify(output)


def build_error_from_output(output: str) -> BuildError:
    return _default_classifier.to_error(output)

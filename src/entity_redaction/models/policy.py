"""
TermSet and PolicySettings — per-request redaction policy.
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Iterator, Optional, Tuple


@dataclass(frozen=True)
class TermSet:
    """
    Immutable set of normalized literal terms.

    Terms keep first-seen order so that anything iterating the set (the
    denylist scanner) produces the same output on every run.
    """

    terms: Tuple[str, ...] = ()
    _members: FrozenSet[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        unique = tuple(dict.fromkeys(t for t in self.terms if t))
        object.__setattr__(self, "terms", unique)
        object.__setattr__(self, "_members", frozenset(unique))

    @classmethod
    def of(cls, terms: Iterable[str]) -> "TermSet":
        return cls(tuple(terms))

    def __contains__(self, term: object) -> bool:
        return term in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self.terms)

    def __len__(self) -> int:
        return len(self.terms)

    def __bool__(self) -> bool:
        return bool(self.terms)


@dataclass(frozen=True)
class PolicySettings:
    """User-controlled configuration governing which entities survive filtering."""

    entity_types: Optional[FrozenSet[str]] = None   # None = no restriction
    threshold: float = 0.5
    allow_terms: TermSet = field(default_factory=TermSet)
    deny_terms: TermSet = field(default_factory=TermSet)

    def to_dict(self) -> dict:
        return {
            "entity_types": sorted(self.entity_types) if self.entity_types else [],
            "threshold": self.threshold,
            "allow_terms": list(self.allow_terms),
            "deny_terms": list(self.deny_terms),
        }

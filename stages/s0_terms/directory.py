"""Immutable term directory"""

from types import MappingProxyType
from typing import Iterable, Iterator, Optional

from core.interfaces import TermLookup
from core.models import Term


class TermDirectory(TermLookup):
    """Read-only mapping of identifier -> Term, built once per run"""

    def __init__(self, terms: Iterable[Term] = ()):
        index: dict[str, Term] = {}
        for term in terms:
            # First definition wins
            index.setdefault(term.identifier, term)
        self._terms = MappingProxyType(index)

    @classmethod
    def from_titles(cls, titles: dict[str, str]) -> "TermDirectory":
        return cls(Term(identifier=k, title=v) for k, v in titles.items())

    def lookup(self, identifier: str) -> Optional[Term]:
        if not isinstance(identifier, str):
            return None
        return self._terms.get(identifier)

    def title_for(self, identifier: str, default: str = "") -> str:
        term = self.lookup(identifier)
        return term.title if term else default

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._terms

    def __len__(self) -> int:
        return len(self._terms)

    def __iter__(self) -> Iterator[Term]:
        return iter(self._terms.values())

"""
Free-text site search.
"""
from typing import Any

from ..entities.base import Specification
from ..entities.site import Site


class SiteSearchSpecification(Specification):
    """
    Matches a site by exact id, or by a case-insensitive substring of
    its name, address, tags, power-source kinds or capacity.

    A blank query matches everything.
    """

    def __init__(self, query: str):
        self._query = (query or '').strip().lower()

    def is_satisfied_by(self, candidate: Any) -> bool:
        if not isinstance(candidate, Site):
            return False
        if not self._query:
            return True
        if self._query == str(candidate.id):
            return True

        haystack = [candidate.name, candidate.address, candidate.capacity.value]
        haystack.extend(candidate.tags)
        haystack.extend(kind.value for kind in candidate.power_sources)
        return any(self._query in text.lower() for text in haystack)

"""Regular-expression matcher for parameter names."""

import re

from parameter_fetcher.domain.errors import InvalidNamePatternError


class NameMatcher:
    """Matches names anywhere in the string, like an unanchored regex search."""

    def __init__(self, pattern: str) -> None:
        try:
            self._regex = re.compile(pattern)
        except re.error as exc:
            raise InvalidNamePatternError(pattern, str(exc)) from exc

    def matches(self, name: str) -> bool:
        return self._regex.search(name) is not None

"""
Multi-pattern substring matching over domains.
"""

from typing import Iterable, Optional

import ahocorasick


class DomainMatcher:
    """
    Answers "does this domain contain any of these fragments?" in one pass.

    Built once from a fixed list of fragments and read-only afterwards, so a
    single instance is shared by every request.
    """

    def __init__(self, fragments: Iterable[str]):
        # dict.fromkeys keeps the order and drops duplicates
        self.fragments = tuple(dict.fromkeys(fragment.lower() for fragment in fragments))

        self._automaton = ahocorasick.Automaton()
        for fragment in self.fragments:
            self._automaton.add_word(fragment, fragment)
        if self.fragments:
            self._automaton.make_automaton()

    def matches(self, domain: Optional[str]) -> bool:
        if not self.fragments or not domain:
            return False

        for _ in self._automaton.iter(domain.lower()):
            return True
        return False

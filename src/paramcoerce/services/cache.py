"""ResolutionCache — memoized directives keyed by (source class, target name).

INVARIANT: Entries are never overwritten or evicted. Whether a class exposes
a conversion method is assumed not to change once the class exists.

No lock is taken. Two threads racing on the first write for a key compute
the same directive, so the loser's write is merely redundant.
"""

from __future__ import annotations

from paramcoerce.domain.directives import Directive
from paramcoerce.domain.names import canonical_type_name


class ResolutionCache:
    """Process-lifetime mapping of conversion paths."""

    def __init__(self) -> None:
        self._entries: dict[tuple[type, str], Directive] = {}

    @staticmethod
    def _key(source_cls: type, target_name: str) -> tuple[type, str]:
        return source_cls, canonical_type_name(target_name)

    def lookup(self, source_cls: type, target_name: str) -> Directive | None:
        """Return the cached directive for the pair, or None on a miss."""
        return self._entries.get(self._key(source_cls, target_name))

    def store(self, source_cls: type, target_name: str, directive: Directive) -> Directive:
        """Insert *directive* unless the pair already has one.

        Returns the directive actually held for the pair.
        """
        return self._entries.setdefault(self._key(source_cls, target_name), directive)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        source_cls, target_name = key
        return self._key(source_cls, target_name) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

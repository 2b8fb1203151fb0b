from bisect import bisect_left
from collections.abc import Iterator

from street_lookup.app.protocols import PrefixIndex


class _Node:
    __slots__ = ("children", "terminal")

    def __init__(self):
        self.children: dict[str, _Node] = {}
        self.terminal = False


class TrieSet(PrefixIndex):
    """
    Set of strings stored as a character trie.
    with_prefix() walks len(prefix) nodes, then only the subtree under it, so the
    cost follows the prefix length and the number of matches, not the set size.
    """

    def __init__(self):
        self._root = _Node()
        self._n = 0

    def add(self, key: str) -> None:
        node = self._root
        for ch in key:
            node = node.children.setdefault(ch, _Node())
        if not node.terminal:
            node.terminal = True
            self._n += 1

    def _find(self, prefix: str) -> _Node | None:
        node = self._root
        for ch in prefix:
            node = node.children.get(ch)
            if node is None:
                return None
        return node

    def with_prefix(self, prefix: str) -> Iterator[str]:
        start = self._find(prefix)
        if start is None:
            return
        # iterative DFS so deep keys never hit the recursion limit
        stack: list[tuple[_Node, str]] = [(start, prefix)]
        while stack:
            node, key = stack.pop()
            if node.terminal:
                yield key
            for ch in sorted(node.children, reverse=True):
                stack.append((node.children[ch], key + ch))

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        node = self._find(key)
        return node is not None and node.terminal

    def __len__(self) -> int:
        return self._n


class SortedPrefixIndex(PrefixIndex):
    """Sorted array of distinct keys; prefix queries bisect to the first candidate."""

    def __init__(self):
        self._keys: list[str] = []

    def add(self, key: str) -> None:
        i = bisect_left(self._keys, key)
        if i == len(self._keys) or self._keys[i] != key:
            self._keys.insert(i, key)

    def with_prefix(self, prefix: str) -> Iterator[str]:
        i = bisect_left(self._keys, prefix)
        while i < len(self._keys) and self._keys[i].startswith(prefix):
            yield self._keys[i]
            i += 1

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        i = bisect_left(self._keys, key)
        return i < len(self._keys) and self._keys[i] == key

    def __len__(self) -> int:
        return len(self._keys)

"""A skew heap supporting removal of arbitrary entries."""

__all__ = ["SkewHeapNode", "SkewHeap"]


def _default_compare(a, b):
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


class SkewHeapNode:
    """An entry of a :class:`SkewHeap`, returned by :meth:`SkewHeap.insert`."""

    __slots__ = ("value", "parent", "left", "right", "_owner")

    def __init__(self, value):
        self.value = value
        self.parent = None
        self.left = None
        self.right = None
        self._owner = None

    def __repr__(self):
        return f"SkewHeapNode({self.value!r})"


class SkewHeap:
    """Min-heap ordered by ``compare(a, b)``, which returns -1 when ``a`` comes first."""

    def __init__(self, compare=None):
        self._compare = compare or _default_compare
        self._root = None
        self._size = 0

    def _merge(self, a, b):
        if a is None:
            return b
        if b is None:
            return a
        head = tail = None
        while a is not None and b is not None:
            if self._compare(a.value, b.value) == -1:
                chosen, a = a, a.right
            else:
                chosen, b = b, b.right
            chosen.right = chosen.left
            chosen.left = None
            if tail is None:
                head = chosen
            else:
                tail.left = chosen
                chosen.parent = tail
            tail = chosen
        rest = a if a is not None else b
        tail.left = rest
        if rest is not None:
            rest.parent = tail
        return head

    def insert(self, value):
        """Add ``value`` and return the node that holds it."""
        node = SkewHeapNode(value)
        node._owner = self
        self._root = self._merge(self._root, node)
        self._root.parent = None
        self._size += 1
        return node

    def remove(self, node):
        """Remove ``node`` from the heap and return its value."""
        if node._owner is not self:
            raise ValueError("node does not belong to this heap")
        parent = node.parent
        replacement = self._merge(node.left, node.right)
        if replacement is not None:
            replacement.parent = parent
        if parent is None:
            self._root = replacement
        elif parent.left is node:
            parent.left = replacement
        else:
            parent.right = replacement
        node.parent = node.left = node.right = None
        node._owner = None
        self._size -= 1
        return node.value

    def peek(self):
        """Return the first value without removing it."""
        if self._root is None:
            raise IndexError("peek from an empty heap")
        return self._root.value

    def pop(self):
        """Remove and return the first value."""
        if self._root is None:
            raise IndexError("pop from an empty heap")
        return self.remove(self._root)

    def __len__(self):
        return self._size

    def __bool__(self):
        return self._root is not None
"""
Tracking of the child packages discovered while unpacking an AIP
"""
from typing import Iterable, List

class ChildReferenceTracker(object):
    """
    a holder for the references to the child packages found during the most recent unpack
    operation.  A caller restoring an object tree recursively uses these to determine which
    archives to unpack next.  The references are replaced--never appended to--with each
    successful unpack.
    """

    def __init__(self):
        self._refs: List[str] = []

    def refs(self) -> List[str]:
        """
        return the references recorded by the most recent successful unpack, in the order
        they were found
        """
        return list(self._refs)

    def replace(self, refs: Iterable[str]):
        """
        replace the recorded references with the given ones
        """
        self._refs = list(refs or [])

    def clear(self):
        self._refs = []

    def __len__(self):
        return len(self._refs)

    def __iter__(self):
        return iter(list(self._refs))

"""
Filtering of an Item's content by bundle name
"""
from typing import FrozenSet

class ContentFilter(object):
    """
    a predicate that determines which of an item's bundles are included in its package.

    A filter is configured with an expression that is a comma-separated list of bundle names.
    If the expression starts with a "+", only the listed bundles are included; otherwise, all
    bundles *except* the listed ones are included.  The default filter includes everything.
    """

    def __init__(self, include_only: bool = False, bundles=None, expression: str = None):
        self.include_only = include_only
        self.bundles: FrozenSet[str] = frozenset(bundles or [])
        self.expression = expression

    @classmethod
    def configure(cls, expr: str):
        """
        create a filter from a filter expression (e.g. "+ORIGINAL,TEXT" or "LICENSE")
        """
        include_only = False
        names = expr
        if expr.startswith("+"):
            include_only = True
            names = expr[1:]
        return cls(include_only, names.split(","), expr)

    def included(self, bundle_name: str) -> bool:
        """
        return True if the bundle with the given name passes this filter
        """
        listed = bundle_name in self.bundles
        return listed if self.include_only else not listed

    def __repr__(self):
        return "ContentFilter({0!r})".format(self.expression)

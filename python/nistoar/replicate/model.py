"""
A lightweight model of the repository objects that get packaged into AIPs.

The repository is a strict tree:  the :py:class:`Site` is the root and contains top-level
:py:class:`Community` objects; communities contain sub-communities and :py:class:`Collection`
objects; collections contain :py:class:`Item` objects.  An item is a leaf with respect to
packaging:  its content files (:py:class:`Bitstream` objects) are grouped into named
:py:class:`Bundle` objects that are packaged together with the item.

Repositories backed by a real persistence layer can supply their own object classes; the
packaging code only relies on the attributes defined here.
"""
from typing import List, Optional

# object type identifiers
BITSTREAM  = 0
BUNDLE     = 1
ITEM       = 2
COLLECTION = 3
COMMUNITY  = 4
SITE       = 5

TYPE_NAMES = {
    BITSTREAM:  "BITSTREAM",
    BUNDLE:     "BUNDLE",
    ITEM:       "ITEM",
    COLLECTION: "COLLECTION",
    COMMUNITY:  "COMMUNITY",
    SITE:       "SITE"
}

# the types whose packages can refer to the packages of child objects
CONTAINER_TYPES = frozenset([COLLECTION, COMMUNITY, SITE])

# the standard bundle names
ORIGINAL_BUNDLE = "ORIGINAL"
LICENSE_BUNDLE  = "LICENSE"
TEXT_BUNDLE     = "TEXT"

def is_leaf_type(objtype: int) -> bool:
    """
    return True if objects of the given type cannot refer to child packages.  Bundles and
    bitstreams are packaged within their item's package, so an item never references children.
    An unrecognized type (including None) is treated as a leaf.
    """
    return objtype not in CONTAINER_TYPES

class Bitstream(object):
    """
    a content file
    """
    type = BITSTREAM

    def __init__(self, name: str, size: int = 0):
        self.name = name
        self.size = size

    def __repr__(self):
        return "Bitstream({0!r}, {1})".format(self.name, self.size)

class Bundle(object):
    """
    a named grouping of content files attached to an Item
    """
    type = BUNDLE

    def __init__(self, name: str, bitstreams: List[Bitstream] = None):
        self.name = name
        self.bitstreams = list(bitstreams or [])

    def __repr__(self):
        return "Bundle({0!r})".format(self.name)

class RepositoryObject(object):
    """
    a base class for the objects that can be packaged as an AIP.  Each has a type and an
    identifier (e.g. a handle).
    """
    type = None

    def __init__(self, identifier: str, name: str = None):
        self.identifier = identifier
        self.name = name

    @property
    def type_name(self):
        return TYPE_NAMES.get(self.type, "UNKNOWN")

    def __repr__(self):
        return "{0}({1!r})".format(self.__class__.__name__, self.identifier)

class Item(RepositoryObject):
    """
    a repository item:  a unit of content whose files are organized into bundles
    """
    type = ITEM

    def __init__(self, identifier: str, bundles: List[Bundle] = None, name: str = None):
        super(Item, self).__init__(identifier, name)
        self.bundles = list(bundles or [])

    def get_bundle(self, name: str) -> Optional[Bundle]:
        """
        return the bundle with the given name or None if the item has no such bundle
        """
        for bundle in self.bundles:
            if bundle.name == name:
                return bundle
        return None

class Collection(RepositoryObject):
    """
    a collection of items
    """
    type = COLLECTION

    def __init__(self, identifier: str, items: List[Item] = None, logo: Bitstream = None,
                 name: str = None):
        super(Collection, self).__init__(identifier, name)
        self.items = list(items or [])
        self.logo = logo

class Community(RepositoryObject):
    """
    a community, which can contain sub-communities and collections
    """
    type = COMMUNITY

    def __init__(self, identifier: str, subcommunities: List['Community'] = None,
                 collections: List[Collection] = None, logo: Bitstream = None, name: str = None):
        super(Community, self).__init__(identifier, name)
        self.subcommunities = list(subcommunities or [])
        self.collections = list(collections or [])
        self.logo = logo

class Site(RepositoryObject):
    """
    the repository site, the root of the object tree
    """
    type = SITE

    def __init__(self, identifier: str, communities: List[Community] = None, name: str = None):
        super(Site, self).__init__(identifier, name)
        self.communities = list(communities or [])

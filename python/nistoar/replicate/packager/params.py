"""
The parameters that control how an object gets packed into or unpacked from an AIP.
"""
from collections import OrderedDict
from collections.abc import Mapping, MutableMapping

REPLACE_MODE            = "replaceMode"
RECURSIVE_MODE          = "recursiveMode"
USE_WORKFLOW            = "useWorkflow"
USE_COLLECTION_TEMPLATE = "useCollectionTemplate"
SKIP_IF_PARENT_MISSING  = "skipIfParentMissing"
CREATE_METADATA_FIELDS  = "createMetadataFields"
KEEP_EXISTING_MODE      = "keepExistingMode"
FILTER_BUNDLES          = "filterBundles"

FLAGS = (REPLACE_MODE, RECURSIVE_MODE, USE_WORKFLOW, USE_COLLECTION_TEMPLATE,
         SKIP_IF_PARENT_MISSING, CREATE_METADATA_FIELDS, KEEP_EXISTING_MODE)

def parse_boolean(value) -> bool:
    """
    interpret a raw configuration value as a boolean.  Only "true" (in any case) is True;
    everything else--including "yes", "1", and the empty string--is False.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).lower() == "true"

def _flag(name, doc):
    def getter(self):
        return self.get_boolean(name)
    def setter(self, value):
        self.set_boolean(name, value)
    return property(getter, setter, None, doc)

class PackageParameters(MutableMapping):
    """
    a set of named options passed to the packaging plugins.  Values are stored as strings; the
    flags that the packaging machinery recognizes (e.g. ``replaceMode``) are also accessible as
    boolean properties (e.g. ``replace_mode``), which read and write the same underlying string
    values.  Options not recognized here are passed through to the plugins verbatim.
    """

    replace_mode = _flag(REPLACE_MODE,
                         "True if existing objects should be replaced by the package contents")
    recursive_mode = _flag(RECURSIVE_MODE,
                           "True if child objects referenced by a package should also be processed")
    use_workflow = _flag(USE_WORKFLOW, "True if restored items should be run through workflow")
    use_collection_template = _flag(USE_COLLECTION_TEMPLATE,
                                    "True if a collection's item template should be applied")
    skip_if_parent_missing = _flag(SKIP_IF_PARENT_MISSING,
                                   "True if an object whose parent does not exist should be skipped")
    create_metadata_fields = _flag(CREATE_METADATA_FIELDS,
                                   "True if unknown metadata fields in a package should be created")
    keep_existing_mode = _flag(KEEP_EXISTING_MODE,
                               "True if objects that already exist should be left untouched")

    def __init__(self, props=None, **kw):
        self._props = OrderedDict()
        if props:
            self.update(props)
        if kw:
            self.update(kw)

    def __getitem__(self, name):
        return self._props[name]

    def __setitem__(self, name, value):
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif not isinstance(value, str):
            value = str(value)
        self._props[name] = value

    def __delitem__(self, name):
        del self._props[name]

    def __iter__(self):
        return iter(self._props)

    def __len__(self):
        return len(self._props)

    def add_property(self, name: str, value: str):
        """
        set an option as a string value.  The value is stored as given.
        """
        self[name] = value

    def get_property(self, name: str, default=None):
        return self._props.get(name, default)

    def get_boolean(self, name: str, default: bool = False) -> bool:
        """
        return the value of the named option interpreted as a boolean (see :py:func:`parse_boolean`)
        or ``default`` if the option is not set.
        """
        if name not in self._props:
            return default
        return parse_boolean(self._props[name])

    def set_boolean(self, name: str, value: bool):
        self[name] = bool(value)

    def flags(self) -> Mapping:
        """
        return the recognized flags that are set in this parameter set as a dictionary mapping
        their names to boolean values
        """
        return OrderedDict((f, self.get_boolean(f)) for f in FLAGS if f in self._props)

    def copy(self):
        return self.__class__(self._props)

    @classmethod
    def layered(cls, defaults=None, configured=None, overrides=None):
        """
        construct a parameter set by layering parameter sources in order of increasing precedence:
        built-in defaults, then module configuration, then caller-supplied overrides.  Any of the
        sources may be None.
        """
        out = cls()
        for layer in (defaults, configured, overrides):
            if layer:
                out.update(layer)
        return out

    def __eq__(self, other):
        if isinstance(other, PackageParameters):
            return self._props == other._props
        if isinstance(other, Mapping):
            return dict(self._props) == dict(other)
        return NotImplemented

    def __repr__(self):
        return "PackageParameters({0})".format(dict(self._props))

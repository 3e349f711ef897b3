"""
The interfaces for the plugins that serialize and deserialize AIPs, and a registry for looking
them up.

Two roles are supported:  a :py:class:`PackageDisseminator` writes an object out to a package
file, and a :py:class:`PackageIngester` creates or replaces an object from a package file.  An
ingester may additionally provide the :py:class:`PackageReferencer` capability, reporting the
child packages referenced from the package it just ingested.  Plugins are registered into a
:py:class:`PluginRegistry` under a role and a logical name (e.g. "AIP").
"""
import importlib
from abc import ABCMeta, abstractmethod
from collections.abc import Mapping
from typing import List

from ..exceptions import ConfigurationException
from .. import system

DISSEMINATOR = "disseminator"
INGESTER = "ingester"

AIP = "AIP"

class PackageDisseminator(metaclass=ABCMeta):
    """
    a plugin that exports a repository object into a package file
    """

    @abstractmethod
    def disseminate(self, context, obj, params, outfile):
        """
        write the given object into a package at the given location

        :param context:   the curation context the operation is part of
        :param obj:       the repository object to export
        :param PackageParameters params:  the options controlling the export
        :param Path outfile:  the path to write the package file to
        :raises PackageFormatError:  if the package cannot be written
        :raises CrosswalkError:      if the object's metadata cannot be converted
        """
        raise NotImplementedError()

class PackageIngester(metaclass=ABCMeta):
    """
    a plugin that creates or updates a repository object from the contents of a package file
    """

    @abstractmethod
    def ingest(self, context, parent, pkgfile, params, extra):
        """
        create a new object from a package.

        :param context:   the curation context the operation is part of
        :param parent:    the object to create the new object within; if None, the parent is
                          determined from the package's manifest
        :param Path pkgfile:  the package file to read
        :param PackageParameters params:  the options controlling the ingest
        :param extra:     any additional plugin-specific data
        :return:  the created object
        :raises ConflictError:  if the identity of the object in the package is already in use
        """
        raise NotImplementedError()

    @abstractmethod
    def replace(self, context, obj, pkgfile, params):
        """
        replace the contents of an existing object with the contents of a package.

        :param context:   the curation context the operation is part of
        :param obj:       the object to replace
        :param Path pkgfile:  the package file to read
        :param PackageParameters params:  the options controlling the replacement
        :return:  the updated object
        """
        raise NotImplementedError()

class PackageReferencer(metaclass=ABCMeta):
    """
    the capability of an ingester to report the references to child packages found in the
    manifest of a package it has ingested.  An ingester need not subclass this class to be
    considered to have this capability; it need only provide a ``get_package_references()``
    method.
    """

    @abstractmethod
    def get_package_references(self, obj) -> List[str]:
        """
        return the references to the child packages listed in the package that the given
        object was most recently ingested from
        """
        raise NotImplementedError()

    @classmethod
    def __subclasshook__(cls, C):
        if cls is PackageReferencer:
            if any("get_package_references" in B.__dict__ and
                   callable(B.__dict__["get_package_references"]) for B in C.__mro__):
                return True
        return NotImplemented

_role_types = {
    DISSEMINATOR: PackageDisseminator,
    INGESTER:     PackageIngester
}

class PluginRegistry(object):
    """
    a lookup of packaging plugins by role and name.  A registry is intended to be built once at
    application start-up and shared read-only thereafter.
    """

    def __init__(self, log=None):
        self._plugins = { DISSEMINATOR: {}, INGESTER: {} }
        if not log:
            log = system.getSysLogger()
        self.log = log.getChild("plugins")

    def register(self, role: str, name: str, plugin):
        """
        register a plugin instance under a role and name, replacing any previously registered one.

        :param str role:  the role the plugin plays, one of DISSEMINATOR or INGESTER
        :param str name:  the logical name to register it under (e.g. "AIP")
        :param plugin:    the plugin instance
        :raises ConfigurationException:  if the role is not recognized or the plugin does not
                                         implement the role's interface
        """
        if role not in _role_types:
            raise ConfigurationException("Unrecognized plugin role: " + str(role))
        if not isinstance(plugin, _role_types[role]):
            raise ConfigurationException("Plugin for {0} role, {1}, is not a {2}: {3}"
                                         .format(role, name, _role_types[role].__name__, repr(plugin)))
        self._plugins[role][name] = plugin
        self.log.debug("Registered %s %s plugin: %s", name, role, plugin.__class__.__name__)

    def get(self, role: str, name: str):
        """
        return the plugin registered for the given role and name or None if there isn't one
        """
        return self._plugins.get(role, {}).get(name)

    def require(self, role: str, name: str):
        """
        return the plugin registered for the given role and name
        :raises ConfigurationException:  if no such plugin is registered
        """
        out = self.get(role, name)
        if out is None:
            raise ConfigurationException("Cannot obtain {0} {1}: no {1} plugin named '{0}' is "
                                         "configured".format(name, role))
        return out

    def names(self, role: str) -> List[str]:
        """
        return the names of the plugins registered for the given role
        """
        return list(self._plugins.get(role, {}).keys())

    def load_plugins(self, config: Mapping):
        """
        instantiate and register plugins described in a configuration dictionary of the form:

        .. code-block:: python

           {
               "disseminator": { "AIP": "mypkg.aip.AIPDisseminator" },
               "ingester":     { "AIP": "mypkg.aip.AIPIngester" }
           }

        Each value is the fully qualified name of a plugin class which is instantiated with no
        arguments.
        """
        for role, plugins in config.items():
            if not isinstance(plugins, Mapping):
                raise ConfigurationException("plugin configuration for role, {0}, is not a "
                                             "dictionary".format(role))
            for name, clsname in plugins.items():
                self.register(role, name, _instantiate(clsname))

def _instantiate(clsname):
    modname, _, name = str(clsname).rpartition('.')
    if not modname:
        raise ConfigurationException("plugin class name is not fully qualified: " + str(clsname))
    try:
        mod = importlib.import_module(modname)
        cls = getattr(mod, name)
    except (ImportError, AttributeError) as ex:
        raise ConfigurationException("Unable to load plugin class, {0}: {1}"
                                     .format(clsname, str(ex)), ex)
    return cls()

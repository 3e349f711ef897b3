"""
Access to the configuration that controls the replication system.

The replication tasks view their configuration as a flat set of dotted property names, each
associated with a string value (e.g. ``replicate.restoretask.recursiveMode = true``).  A
:py:class:`ConfigurationService` provides this view over configuration data, which may be given
either in this flat form or as nested dictionaries (e.g. as read from a YAML or JSON file).
"""
import os, json, logging
from collections import OrderedDict
from collections.abc import Mapping

import yaml

from .exceptions import ConfigurationException

__all__ = [ 'ConfigurationService', 'load_from_file', 'flatten_config', 'ConfigurationException' ]

def _load_properties(fd):
    # a Java-style properties file:  "name = value" (or "name: value") per line
    data = OrderedDict()
    for lineno, line in enumerate(fd, 1):
        line = line.strip()
        if not line or line[0] in "#!":
            continue
        seps = [i for i in (line.find('='), line.find(':')) if i > 0]
        if not seps:
            raise ValueError("line %d: missing '=' after property name" % lineno)
        sep = min(seps)
        data[line[:sep].strip()] = line[sep+1:].strip()
    return data

def load_from_file(configfile):
    """
    read the configuration from the given file and return it as a dictionary.  The file name
    extension is used to determine its format:  ".json" files are read as JSON, ".cfg" and
    ".properties" files are read as flat ``name = value`` property listings, and ".yml", ".yaml" or
    extension-less files are read as YAML.

    :param str configfile:  the path to the configuration file
    :raises ConfigurationException:  if the file is not in a supported format or otherwise
                                     does not contain a configuration dictionary
    :raises IOError:  if the file cannot be opened or read
    """
    configfile = str(configfile)
    ext = os.path.splitext(configfile)[1].lower()
    with open(configfile) as fd:
        try:
            if ext == '.json':
                data = json.load(fd, object_pairs_hook=OrderedDict)
            elif ext in ('.cfg', '.properties'):
                data = _load_properties(fd)
            elif ext in ('.yml', '.yaml', ''):
                data = yaml.safe_load(fd)
            else:
                raise ConfigurationException("%s: unsupported configuration file format" % configfile)
        except (ValueError, yaml.YAMLError) as ex:
            raise ConfigurationException("%s: config parsing error: %s" % (configfile, str(ex)), ex)

    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigurationException("%s: configuration content is not a dictionary" % configfile)
    return data

def _as_str(value):
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_as_str(v) for v in value)
    if value is None:
        return ""
    return str(value)

def flatten_config(data, prefix=""):
    """
    convert a nested configuration dictionary into a flat, ordered dictionary whose keys are
    dotted property names and whose values are strings.  Boolean values are rendered as
    "true" or "false", and list values are joined with commas.
    """
    out = OrderedDict()
    for key, val in data.items():
        name = prefix + str(key)
        if isinstance(val, Mapping):
            out.update(flatten_config(val, name + "."))
        else:
            out[name] = _as_str(val)
    return out

class ConfigurationService(object):
    """
    a view of configuration data as a set of dotted property names with string values.
    """

    def __init__(self, data=None):
        """
        wrap the given configuration data

        :param Mapping data:  the configuration data, either nested or already flattened into
                              dotted property names.
        """
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigurationException("ConfigurationService: data is not a dictionary: " +
                                         str(data))
        self._props = flatten_config(data)

    @classmethod
    def from_file(cls, configfile):
        """
        create a ConfigurationService from the contents of a configuration file (see
        :py:func:`load_from_file`)
        """
        return cls(load_from_file(configfile))

    def property_keys(self, module=None):
        """
        return the full names of all of the properties scoped to the given module (i.e. starting
        with ``module + "."``), in the order they were configured.  None is returned if there are
        no properties for the module.  If ``module`` is not provided, all property names are
        returned.
        """
        if not module:
            return list(self._props.keys())
        pfx = module + "."
        out = [k for k in self._props if k.startswith(pfx)]
        return out or None

    def get_property(self, key, default=None):
        """
        return the string value of the given property, or ``default`` if it is not set
        """
        return self._props.get(key, default)

    def get_boolean(self, key, default=False):
        """
        return the value of the given property interpreted as a boolean.  Only the value "true"
        (in any case) is considered True.
        """
        val = self._props.get(key)
        if val is None:
            return default
        return val.lower() == "true"

    def __contains__(self, key):
        return key in self._props

    def __len__(self):
        return len(self._props)

"""
Loading of packaging parameters from a module's configuration.

Parameters for a particular task are configured with properties of the form:

    [modulename].[taskid].[option] = [value]

For example, if a module is named "replicate" and the task is named "restoretask", its parameters
can be configured like so:

    replicate.restoretask.replaceMode = true
    replicate.restoretask.recursiveMode = true
    replicate.restoretask.createMetadataFields = true

The options ``recursiveMode``, ``useWorkflow``, and ``useCollectionTemplate`` are interpreted as
booleans; all others are passed to the packaging plugins verbatim.
"""
import logging
from typing import Optional

from .params import (PackageParameters, parse_boolean,
                     RECURSIVE_MODE, USE_WORKFLOW, USE_COLLECTION_TEMPLATE)
from ..config import ConfigurationService
from ..utils.logging import blab, get_logger
from .. import system

BOOLEAN_OPTIONS = (RECURSIVE_MODE, USE_WORKFLOW, USE_COLLECTION_TEMPLATE)

class ParameterResolver(object):
    """
    a factory for the :py:class:`PackageParameters` configured for a task
    """

    def __init__(self, config: ConfigurationService, log: logging.Logger = None):
        """
        :param ConfigurationService config:  the configuration to draw parameter settings from
        :param Logger log:  the Logger to derive this instance's Logger from
        """
        self.cfg = config
        self.log = get_logger(log, "params", system.getSysLogger())

    def resolve(self, module: str, taskid: str) -> Optional[PackageParameters]:
        """
        return the parameters configured for a task within a module's configuration.  None is
        returned if there is no configuration at all for the module; if the module is configured
        but has no options for the task, an empty parameter set is returned.

        :param str module:  the name of the module whose configuration should be consulted
        :param str taskid:  the identifier of the task requesting its parameters
        """
        keys = self.cfg.property_keys(module)
        if keys is None:
            self.log.warning("No configuration found for module, %s", module)
            return None

        params = PackageParameters()
        modpfx = module + "."
        taskpfx = taskid + "."
        for key in keys:
            prop = key[len(modpfx):] if key.startswith(modpfx) else key
            if not prop.startswith(taskpfx):
                blab(self.log, "Ignoring %s: not an option for task %s", key, taskid)
                continue

            option = prop[len(taskpfx):]
            value = self.cfg.get_property(key)
            if option in BOOLEAN_OPTIONS:
                blab(self.log, "Setting %s to %s", option, value)
                params.set_boolean(option, parse_boolean(value))
            else:
                blab(self.log, "Setting %s property to %r", option, value)
                params.add_property(option, value)

        self.log.debug("Parameters for %s: %s", taskid, params)
        return params

def resolve_parameters(config: ConfigurationService, module: str, taskid: str):
    """
    return the parameters configured for a task within a module's configuration.  This is
    a convenience function wrapping :py:meth:`ParameterResolver.resolve`.
    """
    return ParameterResolver(config).resolve(module, taskid)

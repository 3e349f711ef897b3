"""
Curation tasks that back up and restore repository objects as AIPs.

These tasks are configured through a module's configuration (see
:py:mod:`~nistoar.replicate.packager.resolve`); in addition to the packaging parameters
configured per task, the following module-level properties are consulted:

``[module].packer.archfmt``
    the archive format (and file extension) of the AIPs (default: "zip")
``[module].packer.cfilter``
    a content filter expression restricting which item bundles are packaged (default: none)
"""
import os, re, logging
from collections import deque
from pathlib import Path
from typing import Callable, List, Optional

from .config import ConfigurationService
from .exceptions import MissingArchiveError
from .packager import (Packer, PackageParameters, ParameterResolver, PluginRegistry,
                       UnpackResult, default_unpack_parameters)
from .utils.logging import get_logger
from . import ReplicateSystem

DEF_MODULE = "replicate"
DEF_ARCHFMT = "zip"

_TASKSUBSYSNAME = "Curation Tasks"
_TASKSUBSYSABBREV = "Task"

def archive_name_for(identifier: str) -> str:
    """
    return a file-system-safe name for the package of the object with the given identifier
    (e.g. "123456789/12" becomes "123456789-12").
    """
    return re.sub(r'[^\w\.\-]', '-', str(identifier))

class PackagerTask(ReplicateSystem):
    """
    a base class for curation tasks that pack or unpack AIPs via a :py:class:`Packer`
    """

    def __init__(self, taskid: str, config: ConfigurationService, registry: PluginRegistry,
                 context_provider=None, log: logging.Logger = None):
        """
        :param str taskid:   the identifier for this task; it selects the packaging parameters
                             configured for the task
        :param ConfigurationService config:  the system configuration
        :param PluginRegistry registry:  the registry of packaging plugins
        :param context_provider:  a function returning the current curation context
        :param Logger log:   the Logger to derive this task's Logger from
        """
        super(PackagerTask, self).__init__(_TASKSUBSYSNAME, _TASKSUBSYSABBREV)
        self.taskid = taskid
        self.cfg = config
        self.registry = registry
        self._ctxpr = context_provider
        self.log = get_logger(log, taskid, self.getSysLogger())

    def load_packager_parameters(self, module: str = DEF_MODULE) -> Optional[PackageParameters]:
        """
        return the packaging parameters configured for this task in the given module's
        configuration, or None if the module is not configured.
        """
        return ParameterResolver(self.cfg, self.log).resolve(module, self.taskid)

    def make_packer(self, obj, module: str = DEF_MODULE) -> Packer:
        """
        create a Packer for the given object configured according to the module's configuration
        """
        archfmt = self.cfg.get_property(module + ".packer.archfmt") or DEF_ARCHFMT
        packer = Packer(obj, archfmt, self.registry, self._ctxpr, self.log)
        cfilter = self.cfg.get_property(module + ".packer.cfilter")
        if cfilter:
            packer.set_content_filter(cfilter)
        return packer

class AIPBackupTask(PackagerTask):
    """
    a task that writes the AIP for a single object into a working directory
    """

    def perform(self, obj, workdir, module: str = DEF_MODULE):
        """
        pack the given object into an AIP within the given directory.

        :param obj:       the repository object to back up
        :param workdir:   the directory to write the archive into; it will be created if necessary
        :param str module:  the name of the module whose configuration applies
        :return:  a tuple containing the archive path and the estimated size of the object's content
        """
        workdir = Path(workdir)
        if not workdir.exists():
            os.makedirs(workdir)

        packer = self.make_packer(obj, module)
        size = packer.size()
        self.log.info("Backing up %s (estimated content size: %d bytes)", obj.identifier, size)
        archive = packer.pack(workdir / archive_name_for(obj.identifier))
        return archive, size

class AIPRestoreTask(PackagerTask):
    """
    a task that restores (or replaces) an object from its AIP and then, if recursion is
    requested, restores its descendents from their AIPs, one archive at a time.
    """

    def perform(self, obj, archive, locate: Callable[[str], Path], module: str = DEF_MODULE,
                overrides: PackageParameters = None,
                find: Callable[[str], object] = None) -> List[UnpackResult]:
        """
        unpack the AIP for an object and those of its descendents

        :param obj:      the object to replace (None, if it is to be restored as a new object)
        :param archive:  the path to the object's AIP
        :param locate:   a function that takes a child package reference and returns the local
                         path to its archive (fetching it if necessary)
        :param str module:  the name of the module whose configuration applies
        :param overrides:  parameters that take precedence over the configured ones
        :param find:     a function that takes a child package reference and returns the existing
                         object it corresponds to, or None if it does not exist; if not provided,
                         all child objects are restored as new objects.
        :return:  the results of each unpack operation, in the order they were carried out
        :raises MissingArchiveError:  if the archive for the object or one of its descendents
                         cannot be found
        """
        params = PackageParameters.layered(defaults=default_unpack_parameters(),
                                           configured=self.load_packager_parameters(module),
                                           overrides=overrides)

        result = self.make_packer(obj, module).unpack(archive, self._unpack_params(obj, params))
        results = [result]
        if not params.recursive_mode:
            return results

        seen = set()
        todo = deque(result.child_refs)
        while todo:
            ref = todo.popleft()
            if ref in seen:
                continue
            seen.add(ref)

            child = find(ref) if find else None
            path = locate(ref)
            if path is None or not Path(path).exists():
                raise MissingArchiveError(ref, path)

            self.log.debug("Unpacking child package %s", ref)
            result = self.make_packer(child, module).unpack(path, self._unpack_params(child, params))
            results.append(result)
            todo.extend(result.child_refs)

        return results

    def _unpack_params(self, obj, params):
        if obj is None and params.replace_mode:
            # nothing to replace
            params = params.copy()
            params.replace_mode = False
        return params

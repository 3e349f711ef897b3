"""
Provide support for backing up and restoring repository objects as Archival Information Packages
(AIPs).

A repository is modeled as a tree of objects (a Site containing Communities, containing Collections,
containing Items whose content files are grouped into named Bundles).  The :py:mod:`packager`
subpackage provides the machinery that decides *what* gets packed or unpacked and with what options;
the byte-level serialization of an AIP is delegated to pluggable disseminator and ingester plugins.
"""
import logging

from .exceptions import *

try:
    from .version import __version__
except ImportError:
    __version__ = "(unset)"

_SYSNAME = "AIP Replication"
_SYSABBREV = "Replicate"

class ReplicateSystem(object):
    """
    static information identifying the replication system (or one of its subsystems).  The
    abbreviations are used to name loggers.
    """
    def __init__(self, subsysname="", subsysabbrev=""):
        self.system_name = _SYSNAME
        self.system_abbrev = _SYSABBREV
        self.subsystem_name = subsysname
        self.subsystem_abbrev = subsysabbrev
        self.system_version = __version__

    def getSysLogger(self):
        """
        return the logger for this (sub)system
        """
        log = logging.getLogger(self.system_abbrev)
        if self.subsystem_abbrev:
            log = log.getChild(self.subsystem_abbrev)
        return log

system = ReplicateSystem()

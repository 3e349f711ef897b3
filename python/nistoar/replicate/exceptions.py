"""
Exceptions raised while packing and unpacking AIPs
"""

__all__ = [
    'ReplicateException', 'ConfigurationException', 'MissingArchiveError', 'ConflictError',
    'PackageException', 'PackageFormatError', 'CrosswalkError', 'PackagingIOError'
]

class ReplicateException(Exception):
    """
    a base class for exceptions raised by the replication system
    """
    def __init__(self, msg=None, cause=None):
        """
        create the exception.

        :param str   msg:  A message to override the default.
        :param Exception cause:  a caught exception that represents the underlying cause of the problem.
        """
        if not msg:
            if cause:
                msg = str(cause)
            else:
                msg = "Unknown replication system error"
        super(ReplicateException, self).__init__(msg)
        self.cause = cause

class ConfigurationException(ReplicateException):
    """
    An exception indicating that the system is not configured properly to carry out an operation;
    for example, a required plugin has not been registered.
    """
    def __init__(self, msg=None, cause=None):
        if not msg and not cause:
            msg = "Configuration error"
        super(ConfigurationException, self).__init__(msg, cause)

class MissingArchiveError(ReplicateException):
    """
    An exception indicating that the archive to unpack for a given object does not exist.
    """
    def __init__(self, objid, archive=None, msg=None):
        """
        create the exception

        :param str objid:    the identifier of the object the archive was to be unpacked into
        :param archive:      the expected location of the archive (if known)
        :param str   msg:    A message to override the default.
        """
        self.objid = objid
        self.archive = archive
        if not msg:
            msg = "Missing archive for object: " + str(objid)
            if archive:
                msg += " (expected at {0})".format(str(archive))
        super(MissingArchiveError, self).__init__(msg)

class ConflictError(ReplicateException):
    """
    An exception raised (typically by an ingester) indicating that an object being restored has an
    identity that is already in use within the repository.
    """
    def __init__(self, objid, msg=None, cause=None):
        """
        create the exception

        :param str objid:   the identifier already in use
        :param str   msg:   A message to override the default.
        :param Exception cause:  a caught exception that represents the underlying cause of the problem.
        """
        self.objid = objid
        if not msg:
            msg = "Object already exists: " + str(objid)
        super(ConflictError, self).__init__(msg, cause)

class PackageException(ReplicateException):
    """
    a base for errors raised by packaging plugins while reading or writing a package
    """
    pass

class PackageFormatError(PackageException):
    """
    An exception indicating that a package could not be written or that its contents do not
    conform to the expected format.
    """
    pass

class CrosswalkError(PackageException):
    """
    An exception indicating a failure converting metadata to or from the format used inside
    a package.
    """
    pass

class PackagingIOError(IOError):
    """
    a generic I/O failure reported for a pack or unpack operation that failed within a
    packaging plugin.  The original plugin exception is available as the ``cause`` property.
    """
    def __init__(self, msg=None, cause=None):
        if not msg:
            msg = str(cause) if cause else "Packaging I/O failure"
        super(PackagingIOError, self).__init__(msg)
        self.cause = cause

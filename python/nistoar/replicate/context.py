"""
Access to the curation context--the transactional context that packing and unpacking operations
take place within.

The context itself (and when it gets committed or rolled back) is managed by whatever drives the
curation tasks; this module just makes the current context available to the code doing the work.
A context is associated with the current thread.
"""
import threading
from contextlib import contextmanager

_local = threading.local()

def curation_context():
    """
    return the curation context set for the current thread, or None if one has not been set
    """
    return getattr(_local, 'context', None)

def set_curation_context(context):
    """
    set the curation context for the current thread, returning the previously set context.
    """
    prev = curation_context()
    _local.context = context
    return prev

@contextmanager
def curating(context):
    """
    a context manager that makes the given context the current curation context for the
    duration of a ``with`` block:

    .. code-block:: python

       with curating(ctx):
           packer.unpack(archive)
    """
    prev = set_curation_context(context)
    try:
        yield context
    finally:
        set_curation_context(prev)

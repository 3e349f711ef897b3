"""
This module provides the :py:class:`Packer`, which packs a repository object into an AIP and
restores or replaces an object from an AIP.

The actual reading and writing of the package bytes is delegated to the disseminator and ingester
plugins registered under the name "AIP" in a :py:class:`~nistoar.replicate.packager.plugins.PluginRegistry`.
The Packer decides what gets packaged and with what options.

A Packer only ever processes a *single* object per call.  When an object is restored from an AIP
that refers to the AIPs of child objects, the references to those children are made available
(via :py:meth:`Packer.child_package_refs` and the returned :py:class:`UnpackResult`) so that the
caller can fetch and unpack each child archive in turn.
"""
import logging
from pathlib import Path
from typing import List

from ..exceptions import (ConfigurationException, MissingArchiveError, ConflictError,
                          PackageFormatError, CrosswalkError, PackagingIOError)
from ..context import curation_context
from ..utils.logging import get_logger
from .. import model, system
from .params import (PackageParameters, FILTER_BUNDLES, REPLACE_MODE, RECURSIVE_MODE,
                     CREATE_METADATA_FIELDS, SKIP_IF_PARENT_MISSING)
from .filter import ContentFilter
from .refs import ChildReferenceTracker
from .plugins import PackageReferencer, DISSEMINATOR, INGESTER, AIP

# unpack outcomes
REPLACED = "replaced"
RESTORED = "restored"
CONFLICT = "conflict"

def default_unpack_parameters():
    """
    return the parameters used to unpack an archive when none are provided.  These request a
    replacement of the target object (restoring it if it is missing) in recursive mode, creating
    any missing metadata fields and skipping objects whose parent is missing.
    """
    return PackageParameters([(REPLACE_MODE, "true"),
                              (RECURSIVE_MODE, "true"),
                              (CREATE_METADATA_FIELDS, "true"),
                              (SKIP_IF_PARENT_MISSING, "true")])

class UnpackResult(object):
    """
    the outcome of a single call to :py:meth:`Packer.unpack`.

    :ivar str status:  one of REPLACED, RESTORED, or CONFLICT; the latter indicates that the
                       object already existed and was left untouched (keepExistingMode).
    :ivar obj:         the updated or restored object (None for a CONFLICT)
    :ivar list child_refs:  references to the child packages that should be unpacked next
    :ivar str conflict_id:  for a CONFLICT, the identifier that was already in use
    """

    def __init__(self, status: str, obj=None, child_refs: List[str] = None, conflict_id: str = None):
        self.status = status
        self.obj = obj
        self.child_refs = list(child_refs or [])
        self.conflict_id = conflict_id

    @property
    def conflicted(self):
        return self.status == CONFLICT

    def __repr__(self):
        return "UnpackResult({0}, {1!r}, refs={2})".format(self.status, self.obj, self.child_refs)

class Packer(object):
    """
    a class that packs and unpacks the AIP for a repository object.

    An instance is not meant to be used concurrently.  The plugins it uses are looked up
    from its registry when first needed and kept for the life of the instance.
    """

    def __init__(self, obj, archfmt: str, registry, context_provider=None, log: logging.Logger = None):
        """
        create the Packer

        :param obj:           the repository object to pack or unpack (may be None to unpack a
                              new object in restore mode)
        :param str archfmt:   the archive format (e.g. "zip"), used as the archive file extension
        :param PluginRegistry registry:  the registry to find the "AIP" plugins in
        :param context_provider:  a function that returns the current curation context; if
                              not provided, :py:func:`~nistoar.replicate.context.curation_context`
                              is used.
        :param Logger log:    the Logger to derive this instance's Logger from
        """
        self.obj = obj
        self.archfmt = archfmt
        self.registry = registry
        self._ctxpr = context_provider or curation_context
        self.log = get_logger(log, "packer", system.getSysLogger())

        self.content_filter = ContentFilter()
        self._refs = ChildReferenceTracker()
        self._dip = None
        self._sip = None

    def set_content_filter(self, expr: str):
        """
        set the filter that restricts which of an item's bundles are packaged.  See
        :py:class:`~nistoar.replicate.packager.filter.ContentFilter` for the expression syntax.
        """
        self.content_filter = ContentFilter.configure(expr)

    def child_package_refs(self) -> List[str]:
        """
        return the references to the child packages found during the most recent successful
        unpack operation.
        """
        return self._refs.refs()

    @property
    def _objid(self):
        return self.obj.identifier if self.obj is not None else None

    def _disseminator(self):
        if self._dip is None:
            self._dip = self.registry.get(DISSEMINATOR, AIP)
        if self._dip is None:
            raise ConfigurationException("Cannot obtain AIP disseminator. No dissemination plugin "
                                         "named 'AIP' is configured.")
        return self._dip

    def _ingester(self):
        if self._sip is None:
            self._sip = self.registry.get(INGESTER, AIP)
        if self._sip is None:
            raise ConfigurationException("Cannot obtain AIP ingester. No ingestion plugin "
                                         "named 'AIP' is configured.")
        return self._sip

    def archive_for(self, packdir) -> Path:
        """
        return the path of the archive that :py:meth:`pack` will create for the given directory
        """
        packdir = Path(packdir)
        return packdir.parent / "{0}.{1}".format(packdir.name, self.archfmt)

    def pack(self, packdir) -> Path:
        """
        create the AIP for the object.  The archive file is written into the parent of the given
        directory and is named after the directory (with the archive format as its extension).

        :param packdir:  the directory the package should be named after
        :return:  the path to the archive file created
        :rtype: Path
        :raises ConfigurationException:  if no AIP disseminator is registered
        :raises PackagingIOError:  if the disseminator fails to write the package
        """
        dip = self._disseminator()
        context = self._ctxpr()

        params = PackageParameters()
        if self.content_filter.expression:
            params.add_property(FILTER_BUNDLES, self.content_filter.expression)

        archive = self.archive_for(packdir)
        self.log.info("Packing %s into %s", self._objid, archive)
        try:
            dip.disseminate(context, self.obj, params, archive)
        except (PackageFormatError, CrosswalkError) as ex:
            raise PackagingIOError(str(ex), ex) from ex

        return archive

    def unpack(self, archive, params: PackageParameters = None) -> UnpackResult:
        """
        replace or restore a *single* object from the contents of an AIP.  If the replace mode
        parameter is set, the object this Packer was created for is replaced; otherwise, a new
        object is restored, with its parent determined from the package itself.

        It is the caller's responsibility to unpack any child packages; their references are
        returned in the result (and are available afterward via :py:meth:`child_package_refs`).

        :param archive:  the path to the AIP archive file
        :param PackageParameters params:  the unpacking options; if None or empty, default
                         recursive-replace parameters (see :py:func:`default_unpack_parameters`)
                         are used.
        :rtype: UnpackResult
        :raises MissingArchiveError:  if the archive does not exist
        :raises ConfigurationException:  if no AIP ingester is registered
        :raises ConflictError:  if the object already exists and keepExistingMode is not set
        :raises PackagingIOError:  if the ingester fails to read the package
        """
        if archive is None or not Path(archive).exists():
            raise MissingArchiveError(self._objid, archive)
        archive = Path(archive)
        sip = self._ingester()
        context = self._ctxpr()

        if not params:
            params = default_unpack_parameters()
        elif not isinstance(params, PackageParameters):
            params = PackageParameters(params)

        try:
            if params.replace_mode:
                self.log.info("Replacing %s from %s", self._objid, archive.name)
                updated = sip.replace(context, self.obj, archive, params)
                status = REPLACED
            else:
                self.log.info("Restoring object from %s", archive.name)
                updated = sip.ingest(context, None, archive, params, None)
                status = RESTORED

        except ConflictError as ex:
            if params.keep_existing_mode:
                self.log.warning("Skipping over object which already exists: %s", ex.objid)
                return UnpackResult(CONFLICT, conflict_id=ex.objid)
            raise

        except (PackageFormatError, CrosswalkError) as ex:
            raise PackagingIOError(str(ex), ex) from ex

        refs = []
        if updated is not None and not model.is_leaf_type(updated.type) and \
           isinstance(sip, PackageReferencer):
            refs = sip.get_package_references(updated) or []
            if refs:
                self.log.debug("Found %d child package references in %s", len(refs), archive.name)
        self._refs.replace(refs)

        return UnpackResult(status, updated, refs)

    def size(self) -> int:
        """
        return an estimate of the total size, in bytes, of the object's AIP together with the
        AIPs of all of its descendents.  The estimate only counts the content files (respecting
        the content filter) and logos.
        """
        objtype = self.obj.type
        if objtype == model.SITE:
            return self._site_size(self.obj)
        if objtype == model.COMMUNITY:
            return self._community_size(self.obj)
        if objtype == model.COLLECTION:
            return self._collection_size(self.obj)
        return self._item_size(self.obj)

    def _site_size(self, site):
        # the Site AIP itself is negligible
        return sum(self._community_size(c) for c in site.communities)

    def _community_size(self, community):
        size = _logo_size(community)
        for comm in community.subcommunities:
            size += self._community_size(comm)
        for coll in community.collections:
            size += self._collection_size(coll)
        return size

    def _collection_size(self, collection):
        size = _logo_size(collection)
        for item in collection.items:
            size += self._item_size(item)
        return size

    def _item_size(self, item):
        size = 0
        for bundle in item.bundles:
            if self.content_filter.included(bundle.name):
                size += sum(bs.size for bs in bundle.bitstreams)
        return size

def _logo_size(obj):
    logo = getattr(obj, 'logo', None)
    return logo.size if logo is not None else 0

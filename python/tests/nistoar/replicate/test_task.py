import os, pdb, logging, tempfile
from pathlib import Path
import unittest as test

from nistoar.replicate import task
from nistoar.replicate.config import ConfigurationService
from nistoar.replicate.packager import (PluginRegistry, PackageDisseminator, PackageIngester,
                                        PackageParameters, DISSEMINATOR, INGESTER, REPLACED, RESTORED,
                                        CONFLICT)
from nistoar.replicate.model import Site, Community, Collection, Item, Bundle, Bitstream
from nistoar.replicate.exceptions import MissingArchiveError, ConflictError

tmpdir = tempfile.TemporaryDirectory(prefix="_test_task.")

loghdlr = None
rootlog = None
def setUpModule():
    global loghdlr
    global rootlog
    rootlog = logging.getLogger()
    loghdlr = logging.FileHandler(os.path.join(tmpdir.name, "test_task.log"))
    loghdlr.setLevel(logging.DEBUG)
    rootlog.addHandler(loghdlr)

def tearDownModule():
    global loghdlr
    if loghdlr:
        if rootlog:
            rootlog.removeHandler(loghdlr)
        loghdlr.flush()
        loghdlr.close()
        loghdlr = None
    tmpdir.cleanup()

class RecordingDisseminator(PackageDisseminator):
    def __init__(self):
        self.params = []
    def disseminate(self, context, obj, params, outfile):
        self.params.append(params)
        with open(outfile, 'w') as fd:
            fd.write(obj.identifier)

class TreeIngester(PackageIngester):
    """
    an ingester that "restores" objects from a dictionary describing the object tree:
    each archive contains the identifier of the object it restores
    """
    def __init__(self, objects, children, existing=()):
        self.objects = objects
        self.children = children
        self.existing = set(existing)
        self.calls = []

    def _read(self, pkgfile):
        with open(pkgfile) as fd:
            return fd.read().strip()

    def ingest(self, context, parent, pkgfile, params, extra):
        objid = self._read(pkgfile)
        self.calls.append(("ingest", objid, params))
        if objid in self.existing:
            raise ConflictError(objid)
        return self.objects[objid]

    def replace(self, context, obj, pkgfile, params):
        objid = self._read(pkgfile)
        self.calls.append(("replace", objid, params))
        return self.objects[objid]

    def get_package_references(self, obj):
        return list(self.children.get(obj.identifier, []))

def make_tree():
    item1 = Item("1234/5", [Bundle("ORIGINAL", [Bitstream("a.dat", 100)]),
                            Bundle("LICENSE", [Bitstream("license.txt", 10)])])
    item2 = Item("1234/6", [Bundle("ORIGINAL", [Bitstream("b.dat", 50)])])
    coll = Collection("1234/3", [item1, item2], logo=Bitstream("logo.png", 4))
    comm = Community("1234/2", collections=[coll])
    site = Site("1234/0", [comm])
    objects = dict((o.identifier, o) for o in (site, comm, coll, item1, item2))
    children = {
        "1234/0": ["1234/2"],
        "1234/2": ["1234/3"],
        "1234/3": ["1234/5", "1234/6"],
        "1234/5": ["1234/99"]
    }
    return objects, children

class TestArchiveName(test.TestCase):

    def test_archive_name_for(self):
        self.assertEqual(task.archive_name_for("1234/5"), "1234-5")
        self.assertEqual(task.archive_name_for("ark:/88434/mds2-1"), "ark--88434-mds2-1")
        self.assertEqual(task.archive_name_for("ITEM@1234.5"), "ITEM-1234.5")

class TestAIPBackupTask(test.TestCase):

    def setUp(self):
        self.objects, children = make_tree()
        self.reg = PluginRegistry()
        self.dip = RecordingDisseminator()
        self.reg.register(DISSEMINATOR, "AIP", self.dip)
        self.workdir = Path(tmpdir.name) / "backup"

    def test_perform(self):
        cfg = ConfigurationService()
        tsk = task.AIPBackupTask("backuptask", cfg, self.reg)
        archive, size = tsk.perform(self.objects["1234/3"], self.workdir)
        self.assertEqual(archive, self.workdir / "1234-3.zip")
        self.assertTrue(archive.is_file())
        self.assertEqual(size, 164)
        self.assertEqual(len(self.dip.params[0]), 0)

    def test_perform_configured(self):
        cfg = ConfigurationService({"replicate": {"packer": {"archfmt": "7z", "cfilter": "+ORIGINAL"}}})
        tsk = task.AIPBackupTask("backuptask", cfg, self.reg)
        archive, size = tsk.perform(self.objects["1234/0"], self.workdir)
        self.assertEqual(archive.name, "1234-0.7z")
        self.assertEqual(size, 154)
        self.assertEqual(dict(self.dip.params[0]), {"filterBundles": "+ORIGINAL"})

        archive, size = tsk.perform(self.objects["1234/0"], self.workdir, "other")
        self.assertEqual(archive.name, "1234-0.zip")
        self.assertEqual(size, 164)

class TestAIPRestoreTask(test.TestCase):

    def setUp(self):
        self.objects, self.children = make_tree()
        self.archdir = Path(tmpdir.name) / "archives"
        os.makedirs(self.archdir, exist_ok=True)
        for objid in self.objects:
            with open(self.archive(objid), 'w') as fd:
                fd.write(objid)

    def archive(self, ref):
        return self.archdir / (task.archive_name_for(ref) + ".zip")

    def make_task(self, sip, config=None):
        reg = PluginRegistry()
        reg.register(INGESTER, "AIP", sip)
        return task.AIPRestoreTask("restoretask", ConfigurationService(config or {}), reg)

    def test_recursive_restore(self):
        sip = TreeIngester(self.objects, self.children)
        tsk = self.make_task(sip, {"replicate.restoretask.recursiveMode": "true"})
        results = tsk.perform(None, self.archive("1234/0"), self.archive)

        self.assertEqual([c[0] for c in sip.calls], ["ingest"] * 5)
        self.assertEqual([c[1] for c in sip.calls],
                         ["1234/0", "1234/2", "1234/3", "1234/5", "1234/6"])
        self.assertTrue(all(r.status == RESTORED for r in results))
        self.assertEqual(results[0].child_refs, ["1234/2"])
        self.assertEqual(results[2].child_refs, ["1234/5", "1234/6"])

        # items never report children
        self.assertEqual(results[3].child_refs, [])

    def test_default_params_replace(self):
        sip = TreeIngester(self.objects, self.children)
        tsk = self.make_task(sip)
        find = lambda ref: self.objects.get(ref) if ref != "1234/6" else None
        results = tsk.perform(self.objects["1234/3"], self.archive("1234/3"), self.archive, find=find)

        self.assertEqual([(c[0], c[1]) for c in sip.calls],
                         [("replace", "1234/3"), ("replace", "1234/5"), ("ingest", "1234/6")])
        self.assertEqual([r.status for r in results], [REPLACED, REPLACED, RESTORED])
        self.assertTrue(sip.calls[0][2].replace_mode)
        self.assertTrue(sip.calls[0][2].create_metadata_fields)
        self.assertFalse(sip.calls[2][2].replace_mode)
        self.assertTrue(sip.calls[2][2].skip_if_parent_missing)

    def test_configured_option_keeps_defaults(self):
        sip = TreeIngester(self.objects, self.children)
        tsk = self.make_task(sip, {"replicate.restoretask.keepExistingMode": "true"})
        results = tsk.perform(self.objects["1234/2"], self.archive("1234/2"), self.archive,
                              find=self.objects.get)

        self.assertEqual([(c[0], c[1]) for c in sip.calls],
                         [("replace", "1234/2"), ("replace", "1234/3"), ("replace", "1234/5"),
                          ("replace", "1234/6")])
        self.assertEqual(len(results), 4)
        params = sip.calls[0][2]
        self.assertTrue(params.replace_mode)
        self.assertTrue(params.recursive_mode)
        self.assertTrue(params.create_metadata_fields)
        self.assertTrue(params.skip_if_parent_missing)
        self.assertTrue(params.keep_existing_mode)

    def test_restore_new_root(self):
        sip = TreeIngester(self.objects, self.children)
        tsk = self.make_task(sip)
        results = tsk.perform(None, self.archive("1234/3"), self.archive)

        self.assertEqual([(c[0], c[1]) for c in sip.calls],
                         [("ingest", "1234/3"), ("ingest", "1234/5"), ("ingest", "1234/6")])
        self.assertEqual([r.status for r in results], [RESTORED] * 3)
        params = sip.calls[0][2]
        self.assertFalse(params.replace_mode)
        self.assertTrue(params.recursive_mode)
        self.assertTrue(params.create_metadata_fields)

    def test_not_recursive(self):
        sip = TreeIngester(self.objects, self.children)
        tsk = self.make_task(sip, {"replicate.restoretask.recursiveMode": "false"})
        results = tsk.perform(None, self.archive("1234/2"), self.archive)
        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].child_refs, ["1234/3"])

    def test_overrides(self):
        sip = TreeIngester(self.objects, self.children)
        tsk = self.make_task(sip, {"replicate.restoretask.recursiveMode": "true",
                                   "replicate.restoretask.useWorkflow": "true"})
        results = tsk.perform(None, self.archive("1234/2"), self.archive,
                              overrides=PackageParameters(recursiveMode="false"))
        self.assertEqual(len(results), 1)
        self.assertFalse(sip.calls[0][2].recursive_mode)
        self.assertTrue(sip.calls[0][2].use_workflow)

    def test_keep_existing(self):
        sip = TreeIngester(self.objects, self.children, existing=["1234/3"])
        tsk = self.make_task(sip, {"replicate.restoretask.recursiveMode": "true",
                                   "replicate.restoretask.keepExistingMode": "true"})
        results = tsk.perform(None, self.archive("1234/2"), self.archive)
        self.assertEqual([r.status for r in results], [RESTORED, CONFLICT])
        self.assertEqual(results[1].conflict_id, "1234/3")

    def test_conflict_fails(self):
        sip = TreeIngester(self.objects, self.children, existing=["1234/3"])
        tsk = self.make_task(sip, {"replicate.restoretask.recursiveMode": "true"})
        with self.assertRaises(ConflictError):
            tsk.perform(None, self.archive("1234/2"), self.archive)

    def test_missing_child_archive(self):
        sip = TreeIngester(self.objects, self.children)
        tsk = self.make_task(sip, {"replicate.restoretask.recursiveMode": "true"})
        os.remove(self.archive("1234/6"))
        with self.assertRaises(MissingArchiveError) as cm:
            tsk.perform(None, self.archive("1234/3"), self.archive)
        self.assertEqual(cm.exception.objid, "1234/6")
        self.assertEqual(len(sip.calls), 2)

    def test_missing_root_archive(self):
        sip = TreeIngester(self.objects, self.children)
        tsk = self.make_task(sip)
        with self.assertRaises(MissingArchiveError):
            tsk.perform(self.objects["1234/3"], self.archdir / "goob.zip", self.archive)
        self.assertEqual(sip.calls, [])

    def test_load_packager_parameters(self):
        tsk = self.make_task(TreeIngester(self.objects, self.children),
                             {"replicate.restoretask.useCollectionTemplate": "true",
                              "replicate.othertask.useWorkflow": "true"})
        params = tsk.load_packager_parameters()
        self.assertEqual(dict(params), {"useCollectionTemplate": "true"})
        self.assertIsNone(tsk.load_packager_parameters("goob"))


if __name__ == '__main__':
    test.main()

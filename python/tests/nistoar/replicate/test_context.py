import os, pdb, threading
import unittest as test

from nistoar.replicate import context as ctxmod

class TestCurationContext(test.TestCase):

    def tearDown(self):
        ctxmod.set_curation_context(None)

    def test_set(self):
        self.assertIsNone(ctxmod.curation_context())
        self.assertIsNone(ctxmod.set_curation_context("ctx1"))
        self.assertEqual(ctxmod.curation_context(), "ctx1")
        self.assertEqual(ctxmod.set_curation_context("ctx2"), "ctx1")
        self.assertEqual(ctxmod.curation_context(), "ctx2")

    def test_curating(self):
        ctxmod.set_curation_context("outer")
        with ctxmod.curating("inner") as ctx:
            self.assertEqual(ctx, "inner")
            self.assertEqual(ctxmod.curation_context(), "inner")
        self.assertEqual(ctxmod.curation_context(), "outer")

        with self.assertRaises(RuntimeError):
            with ctxmod.curating("inner"):
                raise RuntimeError("oops")
        self.assertEqual(ctxmod.curation_context(), "outer")

    def test_per_thread(self):
        seen = []
        def f():
            seen.append(ctxmod.curation_context())
            ctxmod.set_curation_context("other")

        ctxmod.set_curation_context("main")
        t = threading.Thread(target=f)
        t.start()
        t.join()
        self.assertEqual(seen, [None])
        self.assertEqual(ctxmod.curation_context(), "main")


if __name__ == '__main__':
    test.main()

import unittest as ut

from sharestore.storage.errors import PermissionDenied, UnexpectedError
from sharestore.storage.reconcile import make_dirs
from sharestore.util import HaltInterrupt
from .fakes import FakeShareRemote, CountingHaltFlag, service_error


class TestMakeDirs(ut.TestCase):

    def test_current_dir_makes_no_calls(self):
        remote = FakeShareRemote()
        make_dirs(remote, ".")
        self.assertEqual(remote.calls, [])

    def test_current_dir_with_root_makes_no_calls(self):
        remote = FakeShareRemote()
        make_dirs(remote, ".", root="data")
        self.assertEqual(remote.calls, [])

    def test_probe_order_and_creates(self):
        remote = FakeShareRemote(directories=["data/a"])
        make_dirs(remote, "a/b/c", root="data")
        self.assertEqual(remote.calls, [
            ("probe", "data/a/b/c"),
            ("probe", "data/a/b"),
            ("probe", "data/a"),
            ("create", "data/a/b"),
            ("create", "data/a/b/c"),
        ])

    def test_existing_target_makes_one_probe(self):
        remote = FakeShareRemote(directories=["a", "a/b", "a/b/c"])
        make_dirs(remote, "a/b/c")
        self.assertEqual(remote.probes(), ["a/b/c"])
        self.assertEqual(remote.creates(), [])

    def test_nothing_exists(self):
        remote = FakeShareRemote()
        make_dirs(remote, "a/b/c/d")
        self.assertEqual(remote.probes(), ["a/b/c/d", "a/b/c", "a/b", "a"])
        self.assertEqual(remote.creates(), ["a", "a/b", "a/b/c", "a/b/c/d"])

    def test_call_counts(self):
        segments = ["s1", "s2", "s3", "s4", "s5"]
        n = len(segments)
        for k in range(0, n + 1):
            with self.subTest(existing=k):
                existing = ["/".join(segments[:j]) for j in range(1, k + 1)]
                remote = FakeShareRemote(directories=existing)
                make_dirs(remote, "/".join(segments))
                missing_probes = len(remote.probes()) - (1 if k > 0 else 0)
                self.assertEqual(missing_probes, n - k)
                self.assertEqual(len(remote.creates()), n - k)

    def test_probe_failure_aborts(self):
        remote = FakeShareRemote()
        remote.probe_errors["a/b"] = service_error(403, "InsufficientAccountPermissions")
        with self.assertRaises(PermissionDenied):
            make_dirs(remote, "a/b/c")
        self.assertEqual(remote.probes(), ["a/b/c", "a/b"])
        self.assertEqual(remote.creates(), [])

    def test_404_with_other_code_counts_as_missing(self):
        remote = FakeShareRemote()
        remote.probe_errors["a/b/c"] = service_error(404, "ParentNotFound")
        make_dirs(remote, "a/b/c")
        self.assertEqual(remote.creates(), ["a", "a/b", "a/b/c"])

    def test_create_failure_aborts(self):
        remote = FakeShareRemote(directories=["a"])
        remote.create_errors["a/b"] = service_error(500, "InternalError")
        with self.assertRaises(UnexpectedError):
            make_dirs(remote, "a/b/c")
        self.assertEqual(remote.creates(), ["a/b"])
        self.assertNotIn("a/b/c", remote.directories)

    def test_create_race_is_surfaced(self):
        remote = FakeShareRemote()
        remote.create_errors["a"] = service_error(409, "ResourceAlreadyExists")
        with self.assertRaises(UnexpectedError):
            make_dirs(remote, "a/b")

    def test_doubled_separator_is_kept(self):
        remote = FakeShareRemote(directories=["a"])
        make_dirs(remote, "a//b")
        self.assertEqual(remote.probes(), ["a//b", "a/", "a"])
        self.assertEqual(remote.creates(), ["a/", "a//b"])

    def test_metadata_is_passed(self):
        seen = []

        class _Remote(FakeShareRemote):
            def create_directory(self, path, metadata=None):
                seen.append(metadata)
                super().create_directory(path, metadata)

        make_dirs(_Remote(), "a", metadata={"AccessLevel": "GENERAL"})
        self.assertEqual(seen, [{"AccessLevel": "GENERAL"}])

    def test_halt_before_create_keeps_earlier_dirs(self):
        remote = FakeShareRemote()
        # three probes and one create are allowed
        with self.assertRaises(HaltInterrupt):
            make_dirs(remote, "a/b/c", halt_flag=CountingHaltFlag(4))
        self.assertEqual(remote.creates(), ["a"])
        self.assertIn("a", remote.directories)

    def test_halt_before_any_call(self):
        remote = FakeShareRemote()
        with self.assertRaises(HaltInterrupt):
            make_dirs(remote, "a", halt_flag=CountingHaltFlag(0))
        self.assertEqual(remote.calls, [])

    def test_not_found_probe_then_hit(self):
        remote = FakeShareRemote(directories=["x"])
        make_dirs(remote, "x/y")
        self.assertEqual(remote.probes(), ["x/y", "x"])
        self.assertEqual(remote.creates(), ["x/y"])

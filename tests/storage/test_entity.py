import unittest as ut

from sharestore.storage.entity import FileRecord, DirectoryRecord, EntityMode, format_file, format_dir, \
    format_record, caller_path


class _Storage:

    def __init__(self, work_dir):
        self.work_dir = work_dir


class TestFormatEntities(ut.TestCase):

    def test_zero_length_file_has_no_size(self):
        entity = format_file(_Storage("/"), FileRecord("empty.txt", 0))
        self.assertFalse(entity.has_content_length())
        self.assertIsNone(entity.content_length)

    def test_file_with_length(self):
        entity = format_file(_Storage("/"), FileRecord("f.txt", 42))
        self.assertEqual(entity.content_length, 42)
        self.assertTrue(entity.is_file())
        self.assertFalse(entity.is_dir())
        self.assertTrue(entity.done)

    def test_file_ids_and_paths(self):
        entity = format_file(_Storage("/a"), FileRecord("a/f.txt", 10))
        self.assertEqual(entity.id, "a/f.txt")
        self.assertEqual(entity.path, "f.txt")
        self.assertEqual(entity.mode, EntityMode.READ)

    def test_directory(self):
        entity = format_dir(_Storage("/a"), DirectoryRecord("a/sub"))
        self.assertEqual(entity.id, "a/sub")
        self.assertEqual(entity.path, "sub")
        self.assertTrue(entity.is_dir())
        self.assertIsNone(entity.content_length)

    def test_format_record_dispatch(self):
        storage = _Storage("/")
        self.assertTrue(format_record(storage, FileRecord("x", 1)).is_file())
        self.assertTrue(format_record(storage, DirectoryRecord("y")).is_dir())

    def test_caller_path_outside_work_dir(self):
        self.assertEqual(caller_path("/data", "other/f.txt"), "other/f.txt")

    def test_equality(self):
        storage = _Storage("/")
        self.assertEqual(format_file(storage, FileRecord("x", 3)), format_file(storage, FileRecord("x", 3)))
        self.assertNotEqual(format_file(storage, FileRecord("x", 3)), format_dir(storage, DirectoryRecord("x")))

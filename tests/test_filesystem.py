import json
import unittest

from s3_dirfs import (
    AmbiguousPathError,
    DirectoryReader,
    FileHandle,
    InvalidNameError,
    NotAFileError,
    NotDirectoryError,
    NotFoundError,
    S3Filesystem,
    TransportError,
)

from store_fakes import DEFAULT_MODIFIED, InMemoryStore


def scenario_store(**kwargs):
    return InMemoryStore(
        {
            "top.json": '{"data":"top"}',
            "deep/down/top.json": '{"data":"liar"}',
            "dir-a/one.json": '{"data":"one"}',
            "dir-a/two.json": '{"data":"two"}',
            "dir-a/three.json": '{"data":"three"}',
            "dir-b/foo.json": '{"data":"bar"}',
        },
        **kwargs,
    )


class OpenFileTests(unittest.TestCase):
    def setUp(self):
        self.store = scenario_store()
        self.fs = S3Filesystem(self.store, "bucket")

    def test_opens_top_level_file(self):
        with self.fs.open("top.json") as node:
            self.assertIsInstance(node, FileHandle)
            payload = json.loads(node.read())
            info = node.stat()

        self.assertEqual({"data": "top"}, payload)
        self.assertEqual("top.json", info.name)
        self.assertEqual(len('{"data":"top"}'), info.size)
        self.assertEqual(DEFAULT_MODIFIED, info.last_modified)
        self.assertFalse(info.is_dir)
        self.assertEqual([("bucket", "top.json")], self.store.get_calls)

    def test_opens_nested_file_with_dot_prefix(self):
        self.assertEqual(b'{"data":"liar"}', self.fs.read_file("./deep/down/top.json"))

    def test_file_removed_after_resolution_is_not_found(self):
        class RacingStore(InMemoryStore):
            def get_object(self, bucket, key):
                self.objects.pop(key, None)
                return super().get_object(bucket, key)

        fs = S3Filesystem(RacingStore({"gone.json": "x"}), "bucket")

        with self.assertRaises(NotFoundError):
            fs.open("gone.json")

    def test_get_failures_propagate(self):
        self.store.fail("get_object", TransportError("error getting s3 object: denied"))

        with self.assertRaises(TransportError):
            self.fs.open("top.json")

    def test_reading_file_as_directory_fails(self):
        with self.assertRaises(NotDirectoryError):
            self.fs.read_dir("top.json")


class OpenDirectoryTests(unittest.TestCase):
    def setUp(self):
        self.store = scenario_store()
        self.fs = S3Filesystem(self.store, "bucket")

    def test_opens_directory_with_its_children(self):
        with self.fs.open("dir-a") as node:
            self.assertIsInstance(node, DirectoryReader)
            entries, done = node.read_entries(-1)
            info = node.stat()

        self.assertTrue(done)
        self.assertEqual({"one.json", "two.json", "three.json"}, {entry.name for entry in entries})
        self.assertEqual(3, len(entries))
        self.assertTrue(all(not entry.is_dir for entry in entries))
        self.assertEqual("dir-a", info.name)
        self.assertTrue(info.is_dir)

    def test_directory_listing_uses_trailing_separator_prefix(self):
        self.fs.open("dir-a/")

        self.assertEqual(
            [("bucket", "dir-a", "/", None), ("bucket", "dir-a/", "/", None)],
            self.store.list_calls,
        )

    def test_root_lists_top_level_entries(self):
        entries = self.fs.read_dir(".")

        self.assertEqual(
            [("deep", True), ("dir-a", True), ("dir-b", True), ("top.json", False)],
            [(entry.name, entry.is_dir) for entry in entries],
        )
        self.assertEqual(1, len(self.store.list_calls))

    def test_root_stat(self):
        info = self.fs.stat(".")

        self.assertEqual(".", info.name)
        self.assertTrue(info.is_dir)

    def test_empty_bucket_root_is_an_empty_directory(self):
        fs = S3Filesystem(InMemoryStore(), "bucket")

        with fs.open(".") as node:
            self.assertEqual(([], True), node.read_entries(-1))

    def test_distinct_keys_appear_once_with_their_type(self):
        store = InMemoryStore({"p/a": "1", "p/b": "2", "p/c/d": "3", "p/c/e": "4"}, page_size=1)
        fs = S3Filesystem(store, "bucket")

        entries = fs.read_dir("p")

        self.assertEqual([("a", False), ("b", False), ("c", True)], [(e.name, e.is_dir) for e in entries])

    def test_batched_reads(self):
        store = InMemoryStore({"mydir/foo.json": "f", "mydir/bar.json": "b", "mydir/baz.json": "z"})
        fs = S3Filesystem(store, "bucket")

        with fs.open("mydir") as node:
            first, first_done = node.read_entries(2)
            second, second_done = node.read_entries(2)
            third, third_done = node.read_entries(0)

        self.assertEqual((2, False), (len(first), first_done))
        self.assertEqual((1, True), (len(second), second_done))
        self.assertEqual([], third)
        self.assertTrue(third_done)

    def test_reading_directory_as_bytes_fails(self):
        with self.assertRaises(NotAFileError) as ctx:
            self.fs.read_file("dir-a")

        self.assertIn("cannot read a directory", str(ctx.exception))

    def test_directory_vanishing_after_resolution_is_not_found(self):
        class RacingStore(InMemoryStore):
            def list_objects(self, bucket, prefix="", delimiter="/", page_token=None):
                if prefix.endswith("/"):
                    self.objects.clear()
                return super().list_objects(bucket, prefix, delimiter, page_token)

        fs = S3Filesystem(RacingStore({"dir/a": "1"}), "bucket")

        with self.assertRaises(NotFoundError):
            fs.open("dir")

    def test_walk_is_top_down(self):
        walked = list(self.fs.walk("."))

        self.assertEqual(
            [
                (".", ["deep", "dir-a", "dir-b"], ["top.json"]),
                ("deep", ["down"], []),
                ("deep/down", [], ["top.json"]),
                ("dir-a", [], ["one.json", "three.json", "two.json"]),
                ("dir-b", [], ["foo.json"]),
            ],
            walked,
        )

    def test_walk_skips_directories_without_a_usable_name(self):
        store = InMemoryStore({"/x": "1", "a/./b": "2", "a.txt": "3"})
        fs = S3Filesystem(store, "bucket")

        root_entries = fs.read_dir(".")
        walked = list(fs.walk("."))

        self.assertEqual(
            [("", True), ("a", True), ("a.txt", False)],
            [(entry.name, entry.is_dir) for entry in root_entries],
        )
        self.assertEqual([(".", ["a"], ["a.txt"]), ("a", [], [])], walked)


class OpenErrorTests(unittest.TestCase):
    def test_file_and_directory_with_same_name(self):
        store = InMemoryStore({"foo": '{"data":"foo"}', "foo/bar": '{"data":"bar"}'})
        fs = S3Filesystem(store, "bucket")

        with self.assertRaises(AmbiguousPathError) as ctx:
            fs.open("foo")

        self.assertIn("directory name matches file name", str(ctx.exception))
        self.assertEqual([], store.get_calls)

    def test_missing_path(self):
        fs = S3Filesystem(scenario_store(), "bucket")

        with self.assertRaises(NotFoundError):
            fs.open("nonexistent/path")

    def test_invalid_names_fail_before_io(self):
        store = scenario_store()
        fs = S3Filesystem(store, "bucket")

        for name in ("/", "./.", "../top.json"):
            with self.subTest(name=name):
                with self.assertRaises(InvalidNameError):
                    fs.open(name)
        self.assertEqual([], store.list_calls)

    def test_key_ending_with_separator_is_invalid(self):
        fs = S3Filesystem(InMemoryStore({"weird/": '{"data":"weird"}'}), "bucket")

        with self.assertRaises(InvalidNameError) as ctx:
            fs.open("weird/")

        self.assertIn("invalid name", str(ctx.exception))

    def test_console_folder_marker_blocks_opening_the_folder(self):
        fs = S3Filesystem(InMemoryStore({"photos/": "", "photos/cat.jpg": "meow"}), "bucket")

        with self.assertRaises(InvalidNameError) as ctx:
            fs.open("photos")

        self.assertIn("invalid name: photos/", str(ctx.exception))

    def test_listing_failures_propagate(self):
        store = scenario_store()
        store.fail("list_objects", TransportError("could not list s3 objects: denied"))
        fs = S3Filesystem(store, "bucket")

        with self.assertRaises(TransportError):
            fs.open("dir-a")


class ConnectTests(unittest.TestCase):
    def test_connect_builds_boto_client(self):
        calls = []

        def factory(*args, **kwargs):
            calls.append((args, kwargs))
            return object()

        fs = S3Filesystem.connect("bucket-one", endpoint_url="https://example.com", client_factory=factory)

        self.assertEqual("bucket-one", fs.bucket)
        self.assertEqual(("s3",), calls[0][0])
        self.assertEqual("https://example.com", calls[0][1]["endpoint_url"])


if __name__ == "__main__":
    unittest.main()

import unittest

from mrmodpack.exceptions import InvalidVersionFormat
from mrmodpack.models import CompatibilityRecord, Loader, Unresolved, build_record
from mrmodpack.versions import VersionId


class TestLoader(unittest.TestCase):
    def test_parse_is_case_insensitive(self):
        self.assertIs(Loader.parse("Fabric"), Loader.FABRIC)
        self.assertIs(Loader.parse(" any "), Loader.ANY)

    def test_parse_rejects_unknown(self):
        with self.assertRaises(ValueError):
            Loader.parse("liteloader")

    def test_from_registry(self):
        self.assertIs(Loader.from_registry("neoforge"), Loader.NEOFORGE)
        self.assertIsNone(Loader.from_registry("datapack"))
        self.assertIsNone(Loader.from_registry("any"))

    def test_from_registry_ignores_non_strings(self):
        self.assertIsNone(Loader.from_registry(None))
        self.assertIsNone(Loader.from_registry(3))

    def test_build_record_skips_non_string_loaders(self):
        record = build_record("x", "X", [(None, "1.20.1"), ("fabric", "1.20.1")])
        self.assertEqual(record.pairs, frozenset({(Loader.FABRIC, VersionId.parse("1.20.1"))}))


class TestBuildRecord(unittest.TestCase):
    def test_builds_pairs(self):
        record = build_record("x", "Mod X", [("fabric", "1.20.1"), ("forge", "1.20.1"), ("fabric", "1.19.4")])
        self.assertIsInstance(record, CompatibilityRecord)
        self.assertEqual(len(record.pairs), 3)

    def test_skips_unparsable_tokens(self):
        with self.assertLogs("mrmodpack.models", level="WARNING"):
            record = build_record("x", "X", [("fabric", "23w13a"), ("fabric", "1.20.1")])
        self.assertEqual(record.versions_for(Loader.ANY), {VersionId.parse("1.20.1")})

    def test_all_tokens_unparsable_raises(self):
        with self.assertLogs("mrmodpack.models", level="WARNING"):
            with self.assertRaises(InvalidVersionFormat):
                build_record("x", "X", [("fabric", "23w13a"), ("forge", "b1.7.3")])

    def test_no_data_is_unresolved(self):
        result = build_record("x", "X", [])
        self.assertEqual(result, Unresolved("x", "no version data"))

    def test_only_untracked_loaders_is_unresolved(self):
        result = build_record("x", "X", [("datapack", "1.20.1")])
        self.assertIsInstance(result, Unresolved)

    def test_empty_record_not_allowed(self):
        with self.assertRaises(ValueError):
            CompatibilityRecord("x", "X", frozenset())

    def test_any_filter_unions_loaders(self):
        record = build_record("x", "X", [("fabric", "1.20.1"), ("quilt", "1.20.1"), ("forge", "1.19.4")])
        self.assertEqual(record.versions_for(Loader.ANY), {VersionId.parse("1.20.1"), VersionId.parse("1.19.4")})
        self.assertEqual(record.versions_for(Loader.QUILT), {VersionId.parse("1.20.1")})
        self.assertEqual(record.versions_for(Loader.NEOFORGE), frozenset())


if __name__ == "__main__":
    unittest.main()

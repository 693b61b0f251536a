import unittest

from mrmodpack.exceptions import InvalidVersionFormat
from mrmodpack.versions import VersionId, compare


class TestVersionParse(unittest.TestCase):
    def test_parses_full_release(self):
        v = VersionId.parse("1.20.1")
        self.assertEqual((v.major, v.minor, v.patch, v.tag), (1, 20, 1, None))

    def test_missing_patch_is_zero(self):
        self.assertEqual(VersionId.parse("1.20"), VersionId(1, 20, 0))
        self.assertEqual(VersionId.parse("1.20"), VersionId.parse("1.20.0"))
        self.assertEqual(str(VersionId.parse("1.20.0")), "1.20")

    def test_parses_tag(self):
        v = VersionId.parse("1.20.1-rc1")
        self.assertEqual(v.tag, "rc1")
        self.assertEqual(str(v), "1.20.1-rc1")
        self.assertEqual(str(VersionId.parse("1.20-pre2")), "1.20-pre2")

    def test_rejects_malformed(self):
        for raw in ["", "1", "23w13a", "1.14 Pre-Release 1", "a.b.c", "1.20.1-", "1.20.1.2", "b1.7.3"]:
            with self.subTest(raw=raw):
                with self.assertRaises(InvalidVersionFormat):
                    VersionId.parse(raw)

    def test_error_keeps_raw_value(self):
        with self.assertRaises(InvalidVersionFormat) as ctx:
            VersionId.parse("23w13a")
        self.assertEqual(ctx.exception.raw, "23w13a")
        self.assertEqual(ctx.exception.code, "E100")


class TestVersionOrdering(unittest.TestCase):
    def test_numeric_components(self):
        self.assertLess(VersionId.parse("1.9.4"), VersionId.parse("1.19.4"))
        self.assertLess(VersionId.parse("1.19.4"), VersionId.parse("1.20"))
        self.assertLess(VersionId.parse("1.20"), VersionId.parse("1.20.1"))

    def test_tags_are_older_than_release(self):
        self.assertLess(VersionId.parse("1.20.1-rc1"), VersionId.parse("1.20.1"))
        self.assertGreater(VersionId.parse("1.20.1-rc1"), VersionId.parse("1.20"))

    def test_tags_compare_lexically(self):
        self.assertLess(VersionId.parse("1.20-pre1"), VersionId.parse("1.20-rc1"))
        self.assertLess(VersionId.parse("1.20-pre1"), VersionId.parse("1.20-pre2"))

    def test_compare_is_three_way(self):
        a, b = VersionId.parse("1.19.4"), VersionId.parse("1.20.1")
        self.assertEqual(compare(a, b), -1)
        self.assertEqual(compare(b, a), 1)
        self.assertEqual(compare(a, VersionId.parse("1.19.4")), 0)

    def test_total_order_is_consistent(self):
        raws = ["1.20.1", "1.20.1-rc1", "1.20.1-pre2", "1.20", "1.19.4", "1.20-pre1", "1.7.10"]
        versions = [VersionId.parse(r) for r in raws]
        for a in versions:
            for b in versions:
                self.assertEqual(compare(a, b), -compare(b, a))
                for c in versions:
                    if compare(a, b) < 0 and compare(b, c) < 0:
                        self.assertLess(compare(a, c), 0)

    def test_sort_newest_first(self):
        versions = [VersionId.parse(r) for r in ["1.19.4", "1.20.1-rc1", "1.20.1", "1.7.10"]]
        self.assertEqual(
            [str(v) for v in sorted(versions, reverse=True)],
            ["1.20.1", "1.20.1-rc1", "1.19.4", "1.7.10"],
        )

    def test_hashable(self):
        self.assertEqual(len({VersionId.parse("1.20"), VersionId.parse("1.20.0"), VersionId.parse("1.20.1")}), 2)


if __name__ == "__main__":
    unittest.main()

import contextlib
import io
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import mr_modpack
from mrmodpack.config import Settings
from mrmodpack.modrinth_api import ModrinthClient

from test_modrinth_api import API, FakeResponse, FakeSession

ROUTES = {
    f"{API}/project/sodium": FakeResponse({"title": "Sodium"}),
    f"{API}/project/sodium/version": FakeResponse([
        {"loaders": ["fabric"], "game_versions": ["1.20.1", "1.19.4"]},
    ]),
    f"{API}/project/lithium": FakeResponse({"title": "Lithium"}),
    f"{API}/project/lithium/version": FakeResponse([
        {"loaders": ["fabric"], "game_versions": ["1.20.1"]},
    ]),
}


def fake_client(settings=None):
    return ModrinthClient(Settings(min_request_interval=0), session=FakeSession(ROUTES))


class TestParseArgs(unittest.TestCase):
    def test_defaults(self):
        args = mr_modpack.parse_args(["sodium"])
        self.assertEqual(args.top, 10)
        self.assertIsNone(args.workers)

    def test_top_zero_shows_all(self):
        self.assertEqual(mr_modpack.parse_args(["sodium", "--top", "0"]).top, 0)

    def test_rejects_bad_counts(self):
        for argv in (["--workers", "0"], ["--workers", "-2"], ["--top", "-1"], ["--workers", "many"]):
            with self.subTest(argv=argv):
                with contextlib.redirect_stderr(io.StringIO()) as stderr:
                    with self.assertRaises(SystemExit) as ctx:
                        mr_modpack.parse_args(["sodium", *argv])
                self.assertEqual(ctx.exception.code, 2)
                self.assertIn(argv[0], stderr.getvalue())


@mock.patch("mr_modpack.ModrinthClient", side_effect=fake_client)
class TestMain(unittest.TestCase):
    def test_writes_report(self, _client):
        with tempfile.TemporaryDirectory() as tmp:
            report_file = Path(tmp) / "coverage.md"
            code = mr_modpack.main([
                "sodium", "https://modrinth.com/mod/lithium", "ghost",
                "--matrix", "--report", str(report_file), "--workers", "2",
            ])
            self.assertEqual(code, 0)
            text = report_file.read_text(encoding="utf-8")
        self.assertIn("| 1 | 1.20.1 | 2/2 | 100.0% |", text)
        self.assertIn("| 2 | 1.19.4 | 1/2 | 50.0% |", text)
        self.assertIn("## Unresolved Mods\n- ghost", text)

    def test_empty_mod_list(self, _client):
        self.assertEqual(mr_modpack.main([]), mr_modpack.EXIT_EMPTY)

    def test_no_resolvable_mods(self, _client):
        self.assertEqual(mr_modpack.main(["ghost", "phantom"]), mr_modpack.EXIT_NO_DATA)

    def test_input_file_and_loader(self, _client):
        with tempfile.TemporaryDirectory() as tmp:
            mods_file = Path(tmp) / "mods.md"
            mods_file.write_text("- [Sodium](https://modrinth.com/mod/sodium)\n", encoding="utf-8")
            self.assertEqual(mr_modpack.main(["--input", str(mods_file), "--loader", "forge"]), 0)


if __name__ == "__main__":
    unittest.main()

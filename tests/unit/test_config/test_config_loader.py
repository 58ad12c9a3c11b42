# SPDX-License-Identifier: LGPL-3.0-or-later
"""
Unit tests for config file loading: glob expansion, YAML/JSON parsing,
deep merge order and application as argparse defaults.
"""

import argparse
import json
import logging
import tempfile
import unittest
from pathlib import Path

import yaml

from urischeme.config.config_loader import Config
from urischeme.core.exceptions import Fatal

LOG = logging.getLogger("tests.config")


class TestExpandConfigs(unittest.TestCase):
    def test_globs_sorted_and_deduplicated(self):
        with tempfile.TemporaryDirectory() as td:
            td = Path(td)
            for n in ("b.yaml", "a.yaml"):
                (td / n).write_text("{}\n", encoding="utf-8")
            out = Config.expand_configs(LOG, [str(td / "*.yaml"), str(td / "a.yaml")])
            self.assertEqual(out, [str(td / "a.yaml"), str(td / "b.yaml")])

    def test_unmatched_glob_dropped(self):
        with tempfile.TemporaryDirectory() as td:
            self.assertEqual(Config.expand_configs(LOG, [str(Path(td) / "*.yml")]), [])

    def test_plain_path_kept(self):
        self.assertEqual(Config.expand_configs(LOG, ["/no/such.yaml", ""]), ["/no/such.yaml"])


class TestLoadMany(unittest.TestCase):
    def test_yaml_and_json_merge_later_wins(self):
        with tempfile.TemporaryDirectory() as td:
            td = Path(td)
            base = td / "base.yaml"
            base.write_text(
                yaml.safe_dump({"cmd": "register", "scheme": "demo", "nested": {"a": 1, "b": 2}}),
                encoding="utf-8",
            )
            over = td / "over.json"
            over.write_text(json.dumps({"scheme": "other", "nested": {"b": 3}}), encoding="utf-8")

            conf = Config.load_many(LOG, [str(base), str(over)])

            self.assertEqual(conf["cmd"], "register")
            self.assertEqual(conf["scheme"], "other")
            self.assertEqual(conf["nested"], {"a": 1, "b": 3})

    def test_dashed_keys_are_normalized(self):
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "c.yml"
            p.write_text("store-file: reg.json\n", encoding="utf-8")
            self.assertEqual(Config.load_many(LOG, [str(p)]), {"store_file": "reg.json"})

    def test_empty_file(self):
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "empty.yaml"
            p.write_text("", encoding="utf-8")
            self.assertEqual(Config.load_many(LOG, [str(p)]), {})

    def test_non_mapping_is_fatal(self):
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "list.yaml"
            p.write_text("- a\n- b\n", encoding="utf-8")
            with self.assertRaises(Fatal):
                Config.load_many(LOG, [str(p)])

    def test_invalid_json_is_fatal(self):
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "bad.json"
            p.write_text("{not json", encoding="utf-8")
            with self.assertRaises(Fatal):
                Config.load_many(LOG, [str(p)])

    def test_missing_file_is_fatal(self):
        with self.assertRaises(Fatal):
            Config.load_many(LOG, ["/no/such/config.yaml"])


class TestApplyAsDefaults(unittest.TestCase):
    def test_only_parser_dests_are_applied(self):
        p = argparse.ArgumentParser()
        p.add_argument("--scheme")
        p.add_argument("--store-file", dest="store_file")

        Config.apply_as_defaults(LOG, p, {"scheme": "demo", "store-file": "r.json", "unknown": 1})
        args = p.parse_args([])

        self.assertEqual(args.scheme, "demo")
        self.assertEqual(args.store_file, "r.json")
        self.assertFalse(hasattr(args, "unknown"))

    def test_cli_overrides_config(self):
        p = argparse.ArgumentParser()
        p.add_argument("--scheme")
        Config.apply_as_defaults(LOG, p, {"scheme": "demo"})
        self.assertEqual(p.parse_args(["--scheme", "cli"]).scheme, "cli")


if __name__ == "__main__":
    unittest.main()

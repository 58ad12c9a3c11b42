# SPDX-License-Identifier: LGPL-3.0-or-later
import argparse

import pytest

from urischeme.cli.args.parser import build_parser
from urischeme.cli.args.validators import validate_args


def _ns(**kw):
    base = dict(cmd=None, scheme=None, path=None, name=None, args=None, arguments=None, icon=None,
                port=None, store="memory", store_file=None, user_hive=None, software_hive=None, uris=[])
    base.update(kw)
    return argparse.Namespace(**base)


@pytest.mark.unit
class TestValidateArgs:
    def test_cmd_from_config(self):
        validate_args(_ns(scheme="demo"), {"cmd": "exists"})

    def test_cmd_alias_key(self):
        validate_args(_ns(scheme="demo"), {"command": "EXISTS"})

    def test_missing_cmd(self):
        with pytest.raises(SystemExit, match="cmd"):
            validate_args(_ns(), {})

    def test_unknown_cmd(self):
        with pytest.raises(SystemExit, match="Unknown cmd"):
            validate_args(_ns(cmd="install"), {})

    def test_register_needs_path(self):
        with pytest.raises(SystemExit, match="--path"):
            validate_args(_ns(cmd="register", scheme="demo"), {})
        validate_args(_ns(cmd="register", scheme="demo"), {"path": "/bin/demo"})

    def test_update_needs_a_change(self):
        with pytest.raises(SystemExit, match="nothing to change"):
            validate_args(_ns(cmd="update", scheme="demo"), {})
        validate_args(_ns(cmd="update", scheme="demo", args=0), {})

    def test_show_accepts_name_or_scheme(self):
        validate_args(_ns(cmd="show", name="Demo"), {})
        with pytest.raises(SystemExit):
            validate_args(_ns(cmd="show"), {})

    def test_parse_needs_uris_not_store(self):
        validate_args(_ns(cmd="parse", uris=["myapp://x"], store=None), {})
        with pytest.raises(SystemExit, match="URI"):
            validate_args(_ns(cmd="parse"), {})

    def test_hive_store_needs_a_hive(self):
        with pytest.raises(SystemExit, match="--user-hive"):
            validate_args(_ns(cmd="exists", scheme="demo", store="hive"), {})
        validate_args(_ns(cmd="exists", scheme="demo", store="hive"), {"software_hive": "/img/SOFTWARE"})


@pytest.mark.unit
class TestBuildParser:
    def test_args_and_arguments_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--args", "1", "--arguments", "x"])

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.scope == "user"
        assert args.icon_index == 0
        assert args.uris == []

    def test_store_choices(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--store", "registry"])

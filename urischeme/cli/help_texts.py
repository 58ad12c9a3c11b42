# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# urischeme/cli/help_texts.py
from __future__ import annotations

# NOTE:
# Pure help text used by the argparse epilog. Keep examples copy/paste runnable.

YAML_EXAMPLE = r"""# urischeme configuration examples (YAML)
#
# Run:
#   urischeme --config register.yaml
#
# Merge multiple configs (later overrides earlier):
#   urischeme --config base.yaml --config machine.yaml
#
# Required options can come from YAML because urischeme uses a 2-phase parse:
#   Phase 0: reads only --config / logging
#   Phase 1: loads+merges YAML and applies it as argparse defaults
#   Phase 2: parses the full command line (CLI overrides YAML)
#
# --------------------------------------------------------------------------------------
# Common keys
# --------------------------------------------------------------------------------------
# verbose: 0|1|2            # or CLI: -v/-vv
# log_file: ./urischeme.log
# store: winreg             # winreg | hive | file | memory
# scope: user               # user | machine
#
# --------------------------------------------------------------------------------------
# Register a handler (live registry)
# --------------------------------------------------------------------------------------
# cmd: register
# scheme: myapp
# path: 'C:\Program Files\MyApp\myapp.exe'
# name: MyApp               # handler key name (default: the scheme)
# args: 1                   # appends "%1"
# icon: 'C:\Program Files\MyApp\myapp.exe'
# icon_index: 0
#
# --------------------------------------------------------------------------------------
# Stage a machine-wide handler into an offline Windows image
# --------------------------------------------------------------------------------------
# cmd: register
# store: hive
# scope: machine
# software_hive: /mnt/win/Windows/System32/config/SOFTWARE
# scheme: myapp
# path: 'C:\Program Files\MyApp\myapp.exe'
# arguments: --from-uri
#
# --------------------------------------------------------------------------------------
# Dry run against a JSON file store
# --------------------------------------------------------------------------------------
# cmd: register
# store: file
# store_file: ./registry.json
# scheme: demo
# path: /bin/demo
"""

FEATURE_SUMMARY = r"""Operations (--cmd or YAML `cmd:`):
  register    create <scope>\Software\Classes\<name> for a scheme
  update      change path / arguments / icon of an existing registration
  unregister  delete a registration
  exists      exit 0 if the scheme is registered under <name>, 1 otherwise
  show        read a registration back and print it
  parse       parse URIs (as a handler receives them) and print JSON

Stores (--store):
  winreg      live Windows registry (Windows only)
  hive        offline NTUSER.DAT / SOFTWARE hive files (needs python-hivex)
  file        JSON file, useful for dry runs and tests
  memory      in-process only; nothing is kept
"""

CLI_EXAMPLES = r"""Examples:
  urischeme --cmd register --scheme myapp --path C:\Apps\myapp.exe --args 1
  urischeme --cmd exists --scheme myapp --name myapp
  urischeme --cmd update --scheme myapp --name myapp --icon C:\Apps\myapp.ico
  urischeme --cmd show --name myapp --json
  urischeme --cmd parse "myapp://open/doc?id=42"
  urischeme --store file --store-file reg.json --cmd register --scheme demo --path /bin/demo
"""

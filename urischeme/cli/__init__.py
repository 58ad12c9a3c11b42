# SPDX-License-Identifier: LGPL-3.0-or-later
# urischeme/cli/__init__.py

# SPDX-License-Identifier: GPL-2.0-or-later
import logging


class FakeLogger:
    def __init__(self):
        self.records = []

    def _log(self, level, msg, *a):
        text = str(msg)
        if a:
            try:
                text = text % a
            except (TypeError, ValueError):
                pass
        self.records.append((level, text))

    def info(self, msg, *a, **k): self._log("info", msg, *a)
    def warning(self, msg, *a, **k): self._log("warning", msg, *a)
    def error(self, msg, *a, **k): self._log("error", msg, *a)
    def debug(self, msg, *a, **k): self._log("debug", msg, *a)

    def log(self, level, msg, *a, **k):
        self._log(logging.getLevelName(level).lower(), msg, *a)

    def messages(self, level):
        return [m for (lvl, m) in self.records if lvl == level]

    def isEnabledFor(self, _lvl):
        return False

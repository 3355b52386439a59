"""`{{name}}` placeholder resolution for request files.

Lookup order:
1) variables passed on the command line (`--var name=value`)
2) `@name = value` definitions seen earlier in the file
3) process environment
Dynamic placeholders (`{{$uuid}}`, `{{$timestamp}}`, `{{$randomInt}}`) are
generated on every use.
"""

from __future__ import annotations

import os
import random
import re
import time
import uuid
from typing import Callable, Mapping

from core.errors import UndefinedVariableError

PLACEHOLDER = re.compile(r"\{\{\s*(\$?[A-Za-z_][\w.-]*)\s*\}\}")
DEFINITION = re.compile(r"^@([A-Za-z_][\w.-]*)\s*=\s*(.*)$")

_DYNAMIC: dict[str, Callable[[], str]] = {
    "$uuid": lambda: str(uuid.uuid4()),
    "$timestamp": lambda: str(int(time.time())),
    "$randomInt": lambda: str(random.randint(0, 1000)),  # nosec
}


class VariableResolver:
    def __init__(
        self,
        *,
        overrides: Mapping[str, str] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._overrides = dict(overrides or {})
        self._environ = os.environ if environ is None else environ
        self._file_vars: dict[str, str] = {}

    @property
    def file_variables(self) -> dict[str, str]:
        return dict(self._file_vars)

    def define(self, name: str, raw_value: str) -> None:
        """Register a file variable; its value may reference earlier variables."""

        self._file_vars[name] = self.resolve(raw_value.strip())

    def lookup(self, name: str) -> str:
        if name in _DYNAMIC:
            return _DYNAMIC[name]()
        if name in self._overrides:
            return self._overrides[name]
        if name in self._file_vars:
            return self._file_vars[name]
        if name in self._environ:
            return self._environ[name]
        raise UndefinedVariableError(name)

    def resolve(self, text: str) -> str:
        if "{{" not in text:
            return text
        return PLACEHOLDER.sub(lambda m: self.lookup(m.group(1)), text)


def parse_definition(line: str) -> tuple[str, str] | None:
    """Split an `@name = value` line; `None` when the line is not a definition."""

    match = DEFINITION.match(line.strip())
    if not match:
        return None
    return match.group(1), match.group(2)

"""
Source text rewriting.

ImportRewriter applies the import path substitutions of a CopyPlan to Go
source text. Only complete string literals are replaced, so
`"example.com/m/foo"` never matches inside `"example.com/m/foopkg"` or
`"example.com/m/foo/bar"`. Both interpreted (double-quoted) and raw
(backquoted) literals are matched, and each keeps its quoting. All
substitutions are applied in a single pass: a replacement is never itself
rewritten by a later substitution.

Formatters normalize a file after it has been written.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from .toolchain import GoToolchain
from .types import Substitution

QUOTES = ('"', "`")


def quote(import_path: str, mark: str = '"') -> str:
    """
    Wrap an import path in string literal quotes.

    Args:
        import_path: Import path to quote
        mark: Quote character, `"` for an interpreted literal or a backquote for a raw one

    Returns:
        The import path as it appears in Go source
    """
    return f"{mark}{import_path}{mark}"


class ImportRewriter:
    """
    Rewrites quoted import paths in Go source text.

    Attributes:
        replacements: Mapping of quoted old literal to quoted new literal
    """

    def __init__(self, substitutions: Iterable[Substitution | tuple[str, str]]) -> None:
        self.replacements: dict[str, str] = {}
        for old, new in substitutions:
            for mark in QUOTES:
                self.replacements.setdefault(quote(old, mark), quote(new, mark))

        # Longest first, so the alternation never settles for a shorter literal.
        literals = sorted(self.replacements, key=len, reverse=True)
        self._pattern = None
        if literals:
            self._pattern = re.compile("|".join(re.escape(lit) for lit in literals))

    def rewrite(self, text: str) -> str:
        """
        Replace every planned import path literal in `text`.

        Args:
            text: Go source text

        Returns:
            The text with old import paths swapped for their new ones
        """
        if self._pattern is None:
            return text
        return self._pattern.sub(lambda m: self.replacements[m.group(0)], text)


class SourceFormatter(Protocol):
    """Normalizes a written Go source file in place."""

    def format(self, path: Path) -> None: ...


class GoImportsFormatter:
    """
    Runs goimports on written files.

    Attributes:
        toolchain: GoToolchain used to run goimports
        local_module: Module whose imports goimports groups separately, or None
    """

    def __init__(self, toolchain: GoToolchain, local_module: str | None = None) -> None:
        self.toolchain = toolchain
        self.local_module = local_module

    def format(self, path: Path) -> None:
        self.toolchain.goimports(path, self.local_module)

"""
Import directive extraction for Solidity sources.

This module provides a small tolerant scanner that finds the path of every
import directive in a source file:
- import "path";
- import "path" as Alias;
- import * as Alias from "path";
- import {A, B as C} from "path";

Comments and string literals are skipped by the scanner, so an `import`
written inside a comment or a string is not reported. A file that cannot be
scanned yields a diagnostic instead of raising; callers treat it as having
no imports.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Token kinds
IDENT = "ident"
STRING = "string"
PUNCT = "punct"

Token = Tuple[str, str, int]

# Tokens after which a new top-level statement can begin
_STATEMENT_BOUNDARIES = {";", "{", "}"}


class _ScanError(Exception):
    """Internal: raised by the tokenizer, converted into a diagnostic."""

    def __init__(self, message: str, position: int):
        super().__init__(message)
        self.position = position


@dataclass(frozen=True)
class ImportScanResult:
    """Outcome of scanning one file: import paths, or a diagnostic."""

    imports: Tuple[str, ...] = ()
    diagnostic: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.diagnostic is None


def _is_ident_start(ch: str) -> bool:
    return ch.isalpha() or ch in "_$"


def _is_ident_part(ch: str) -> bool:
    return ch.isalnum() or ch in "_$"


def _tokenize(text: str) -> Iterator[Token]:
    """Yield identifier, string and punctuation tokens, skipping whitespace and comments."""
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]

        if ch.isspace():
            i += 1
            continue

        if text.startswith("//", i):
            newline = text.find("\n", i)
            i = n if newline == -1 else newline + 1
            continue

        if text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end == -1:
                raise _ScanError("unterminated block comment", i)
            i = end + 2
            continue

        if ch in "\"'":
            start = i
            i += 1
            chars = []
            while True:
                if i >= n or text[i] == "\n":
                    raise _ScanError("unterminated string literal", start)
                if text[i] == "\\" and i + 1 < n:
                    chars.append(text[i + 1])
                    i += 2
                    continue
                if text[i] == ch:
                    i += 1
                    break
                chars.append(text[i])
                i += 1
            yield (STRING, "".join(chars), start)
            continue

        if _is_ident_start(ch):
            start = i
            while i < n and _is_ident_part(text[i]):
                i += 1
            yield (IDENT, text[start:i], start)
            continue

        yield (PUNCT, ch, i)
        i += 1


def _line_of(text: str, position: int) -> int:
    return text.count("\n", 0, position) + 1


class ImportExtractor:
    """Extracts raw import strings from Solidity source text."""

    def scan(self, contents: str) -> ImportScanResult:
        """
        Scan source text for import directives.

        Args:
            contents: Full text of a source file

        Returns:
            ImportScanResult with the import paths in file order, or with a
            diagnostic (and no imports) if the text could not be scanned
        """
        if contents.startswith("\ufeff"):
            contents = contents[1:]

        imports: List[str] = []
        previous: Optional[Token] = None
        statement: Optional[List[Token]] = None
        statement_start = 0

        try:
            for token in _tokenize(contents):
                kind, value, position = token

                if statement is not None:
                    if kind == PUNCT and value == ";":
                        path = self._import_path(statement)
                        if path is None:
                            raise _ScanError("import directive without a path", statement_start)
                        imports.append(path)
                        statement = None
                    else:
                        statement.append(token)
                elif (
                    kind == IDENT
                    and value == "import"
                    and (previous is None or (previous[0] == PUNCT and previous[1] in _STATEMENT_BOUNDARIES))
                ):
                    statement = []
                    statement_start = position

                previous = token

            if statement is not None:
                raise _ScanError("unterminated import directive", statement_start)

        except _ScanError as e:
            return ImportScanResult(
                diagnostic=f"{e} at line {_line_of(contents, e.position)}"
            )

        return ImportScanResult(imports=tuple(imports))

    @staticmethod
    def _import_path(statement: List[Token]) -> Optional[str]:
        """Pick the path literal of an import statement (after `from` if present)."""
        seen_from = False
        has_from = any(kind == IDENT and value == "from" for kind, value, _ in statement)
        for kind, value, _ in statement:
            if kind == IDENT and value == "from":
                seen_from = True
                continue
            if kind == STRING and (seen_from or not has_from):
                return value
        return None

    def extract(self, contents: str, source: Optional[Path] = None) -> List[str]:
        """
        Return the import strings declared in `contents`.

        Never raises on malformed input: the failure is logged and an
        empty list is returned.

        Args:
            contents: Full text of a source file
            source: File the text came from (used in the log message)

        Returns:
            Import strings in declaration order
        """
        result = self.scan(contents)
        if not result.ok:
            logger.warning(f"Failed to parse imports of {source or '<source>'}: {result.diagnostic}")
            return []
        return list(result.imports)

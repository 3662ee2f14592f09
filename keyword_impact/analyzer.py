"""Finding keyword usages in PHP sources."""

from __future__ import annotations

import logging
import string
from pathlib import Path

from keyword_impact.files import read_file, walk_files
from keyword_impact.php_lexer import Token, TokenKind, tokenize
from keyword_impact.results import AnalysisReport, Match, Vendor

logger = logging.getLogger(__name__)

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)

_NAME_KINDS = (
    TokenKind.NAME,
    TokenKind.QUALIFIED_NAME,
    TokenKind.FULLY_QUALIFIED_NAME,
)
_MEMBER_ACCESS = frozenset({"->", "?->", "::"})
_NOT_CALL_PREFIXES = frozenset({"new", "function", "fn", "#["})
_SPECIAL_CLASSES = frozenset({"self", "parent", "static"})
_RESERVED = frozenset(
    """
    abstract and array as break callable case catch class clone const continue
    declare default do echo else elseif empty enddeclare endfor endforeach endif
    endswitch endwhile eval exit die extends final finally fn for foreach from
    function global goto if implements include include_once instanceof insteadof
    interface isset list match namespace new or print private protected public
    readonly require require_once return static switch throw trait try unset use
    var while xor yield int float bool string void mixed never iterable object
    null true false self parent
    """.split()
)


def _fold(text: str) -> str:
    return text.translate(_ASCII_LOWER)


def _last_segment(name: str) -> str:
    return name.rsplit("\\", 1)[-1]


class NameResolver:
    """Resolves names against the current namespace and its imports."""

    def __init__(self, namespace: str = "") -> None:
        self.namespace = namespace.strip("\\")
        self._imports: dict[str, dict[str, str]] = {
            "class": {},
            "function": {},
            "const": {},
        }

    def enter_namespace(self, name: str) -> None:
        self.namespace = name.strip("\\")
        for table in self._imports.values():
            table.clear()

    def add_import(self, kind: str, name: str, alias: str | None = None) -> None:
        full = name.lstrip("\\")
        self._imports[kind][_fold(alias or _last_segment(full))] = full

    def _prefixed(self, name: str) -> str:
        return f"{self.namespace}\\{name}" if self.namespace else name

    def _resolve(self, name: str, table: dict[str, str]) -> str:
        if name.startswith("\\"):
            return name[1:]
        head, sep, rest = name.partition("\\")
        if sep:
            if _fold(head) == "namespace":
                return self._prefixed(rest)
            imported = self._imports["class"].get(_fold(head))
            if imported:
                return f"{imported}\\{rest}"
            return self._prefixed(name)
        return table.get(_fold(name)) or self._prefixed(name)

    def resolve_function(self, name: str) -> str:
        return self._resolve(name, self._imports["function"])

    def resolve_class(self, name: str) -> str:
        if _fold(name) in _SPECIAL_CLASSES:
            return name
        return self._resolve(name, self._imports["class"])


class _FileWalk:
    def __init__(self, analyzer: Analyzer, vendor: Vendor, source: str) -> None:
        self.analyzer = analyzer
        self.vendor = vendor
        self.resolver = NameResolver()
        self.matches: list[Match] = []
        self.scopes: list[str] = []
        self.pending_class = False
        self.tokens = [
            Token(TokenKind.PUNCTUATION, ";", t.offset)
            if t.kind is TokenKind.CLOSE_TAG
            else t
            for t in tokenize(source)
            if t.kind not in (TokenKind.INLINE_HTML, TokenKind.OPEN_TAG)
        ]

    def run(self) -> list[Match]:
        i = 0
        while i < len(self.tokens):
            i = self._step(i)
        return self.matches

    def _tok(self, i: int) -> Token | None:
        return self.tokens[i] if 0 <= i < len(self.tokens) else None

    def _is(self, i: int, value: str) -> bool:
        tok = self._tok(i)
        return tok is not None and tok.kind is TokenKind.PUNCTUATION and tok.value == value

    def _in_class(self) -> bool:
        return bool(self.scopes) and self.scopes[-1] == "class"

    def _record(self, name: str, is_hard: bool) -> None:
        keyword = self.analyzer.keyword_for(name)
        if keyword is not None:
            self.matches.append(Match(keyword, self.vendor, is_hard))

    def _hard(self, name: str) -> None:
        if self.analyzer.hard:
            self._record(_last_segment(name), True)

    def _soft(self, resolved: str) -> None:
        self._record(_last_segment(resolved), False)

    def _is_call(self, prev: Token | None, nxt: Token | None) -> bool:
        if nxt is None or nxt.kind is not TokenKind.PUNCTUATION or nxt.value != "(":
            return False
        return prev is None or _fold(prev.value) not in _NOT_CALL_PREFIXES

    def _step(self, i: int) -> int:
        tok = self.tokens[i]
        prev, nxt = self._tok(i - 1), self._tok(i + 1)

        if tok.kind is TokenKind.PUNCTUATION:
            if tok.value == "{":
                self.scopes.append("class" if self.pending_class else "block")
                self.pending_class = False
            elif tok.value == "}" and self.scopes:
                self.scopes.pop()
            return i + 1
        if tok.kind not in _NAME_KINDS:
            return i + 1

        if tok.kind is TokenKind.FULLY_QUALIFIED_NAME:
            self._hard(tok.value)
            if self._is_call(prev, nxt):
                self._soft(self.resolver.resolve_function(tok.value))
            return i + 1

        if tok.kind is TokenKind.QUALIFIED_NAME:
            self._hard(self.resolver.resolve_class(tok.value))
            if self._is_call(prev, nxt):
                self._soft(self.resolver.resolve_function(tok.value))
            return i + 1

        if prev is not None and prev.kind is TokenKind.PUNCTUATION and prev.value in _MEMBER_ACCESS:
            self._hard(tok.value)
            return i + 1

        word = _fold(tok.value)
        if word == "namespace" and nxt is not None and (
            nxt.kind in _NAME_KINDS or nxt.value in ("{", ";")
        ):
            return self._namespace(i + 1)
        if word == "use" and not self._in_class() and (
            prev is None or prev.value in (";", "{", "}")
        ):
            return self._use(i + 1)
        if word == "function":
            return self._function(i + 1)
        if word in ("class", "interface", "trait"):
            self.pending_class = True
            return i + 1
        if word == "enum" and nxt is not None and nxt.kind is TokenKind.NAME:
            self.pending_class = True
            return i + 1
        if word in _RESERVED:
            return i + 1

        self._hard(tok.value)
        if self._is_call(prev, nxt):
            self._soft(self.resolver.resolve_function(tok.value))
        return i + 1

    def _namespace(self, i: int) -> int:
        parts = []
        while (tok := self._tok(i)) is not None and tok.value not in (";", "{"):
            if tok.kind in _NAME_KINDS:
                parts.append(tok.value)
            i += 1
        self.resolver.enter_namespace("".join(parts))
        return i

    def _function(self, i: int) -> int:
        j = i + 1 if self._is(i, "&") else i
        tok = self._tok(j)
        if tok is None or tok.kind is not TokenKind.NAME:
            return i
        self._hard(tok.value)
        if not self._in_class():
            self._soft(tok.value)
        return j + 1

    def _use_kind(self, i: int, default: str) -> tuple[str, int]:
        tok = self._tok(i)
        if tok is not None and tok.kind is TokenKind.NAME and _fold(tok.value) in ("function", "const"):
            return _fold(tok.value), i + 1
        return default, i

    def _use(self, i: int) -> int:
        kind, i = self._use_kind(i, "class")
        while (tok := self._tok(i)) is not None and tok.value != ";":
            if tok.value == ",":
                i += 1
                continue
            i = self._use_clause(i, kind, "")
        return i + 1

    def _use_clause(self, i: int, kind: str, prefix: str) -> int:
        kind, i = self._use_kind(i, kind)
        tok = self._tok(i)
        if tok is None:
            return i
        if tok.kind not in _NAME_KINDS:
            return i + 1
        if tok.kind is not TokenKind.QUALIFIED_NAME:
            self._hard(tok.value)
        name = prefix + tok.value.lstrip("\\")
        i += 1
        if self._is(i, "\\") and self._is(i + 1, "{"):
            i += 2
            while (inner := self._tok(i)) is not None and inner.value != "}":
                if inner.value == ",":
                    i += 1
                    continue
                i = self._use_clause(i, kind, name + "\\")
            return i + 1
        alias = None
        keyword, following = self._tok(i), self._tok(i + 1)
        if (
            keyword is not None
            and keyword.kind is TokenKind.NAME
            and _fold(keyword.value) == "as"
            and following is not None
            and following.kind is TokenKind.NAME
        ):
            alias = following.value
            self._hard(alias)
            i += 2
        self.resolver.add_import(kind, name, alias)
        return i


class Analyzer:
    """Counts soft (function) and hard (any identifier) uses of keywords."""

    def __init__(self, keywords, hard: bool = True) -> None:
        self.keywords = tuple(keywords)
        self.hard = hard
        self._lookup: dict[str, str] = {}
        for keyword in self.keywords:
            self._lookup.setdefault(_fold(keyword), keyword)

    def keyword_for(self, name: str) -> str | None:
        """The first keyword equal to ``name`` ignoring ASCII case."""
        return self._lookup.get(_fold(name))

    def analyze(self, source: str, vendor: Vendor = Vendor.OTHER) -> list[Match]:
        return _FileWalk(self, vendor, source).run()


def _analyze_path(analyzer: Analyzer, path: Path, sources_root: Path) -> list[Match]:
    source = read_file(path, sources_root)
    if source is None:
        return []
    return analyzer.analyze(source.contents, source.vendor)


def analyze_file(path, sources_root, keywords) -> list[Match]:
    """Matches in one file; empty if the file cannot be read."""
    return _analyze_path(Analyzer(keywords), Path(path), Path(sources_root))


def analyze_directory(sources_directory, keywords) -> AnalysisReport:
    """Analyse every PHP file below ``sources_directory``."""
    logger.info("Starting analysis...")
    keywords = list(keywords)
    root = Path(sources_directory).resolve(strict=True)
    analyzer = Analyzer(keywords)
    per_file = [_analyze_path(analyzer, path, root) for path in walk_files(root)]
    logger.info("Collected matches from %d files.", len(per_file))

    report = AnalysisReport(len(per_file))
    report.add_matches(match for matches in per_file for match in matches)
    report.ensure_all_keywords(keywords)
    logger.info("Analysis complete.")
    return report
from collections import Counter

import pytest

from keyword_impact.analyzer import (
    Analyzer,
    NameResolver,
    analyze_directory,
    analyze_file,
)
from keyword_impact.results import ImpactLevel, Match, Vendor


def _soft(keyword, vendor=Vendor.OTHER):
    return Match(keyword, vendor, False)


def _hard(keyword, vendor=Vendor.OTHER):
    return Match(keyword, vendor, True)


def test_function_call_is_soft_and_hard():
    matches = Analyzer(["foo"]).analyze("<?php foo();")
    assert Counter(matches) == Counter([_soft("foo"), _hard("foo")])


def test_case_insensitive_reports_given_keyword():
    matches = Analyzer(["Foo"]).analyze("<?php FOO();")
    assert set(matches) == {_soft("Foo"), _hard("Foo")}


def test_method_declaration_is_hard_only():
    source = "<?php class C { public function foo() {} }"
    assert Analyzer(["foo"]).analyze(source) == [_hard("foo")]


def test_function_declaration_counts_soft():
    source = "<?php function foo() {}"
    assert _soft("foo") in Analyzer(["foo"]).analyze(source)


def test_method_call_is_not_a_function_call():
    matches = Analyzer(["foo"]).analyze("<?php $x->foo();")
    assert matches == [_hard("foo")]


def test_use_function_alias_resolves_to_target():
    source = "<?php use function Lib\\target as alias; alias();"
    assert Analyzer(["target"]).analyze(source) == [_soft("target")]


def test_fully_qualified_call():
    matches = Analyzer(["bar"]).analyze("<?php \\Lib\\bar();")
    assert Counter(matches) == Counter([_soft("bar"), _hard("bar")])


def test_strings_and_comments_do_not_match():
    source = "<?php echo 'foo'; // foo()\n/* foo() */"
    assert Analyzer(["foo"]).analyze(source) == []


def test_hard_disabled_keeps_soft_only():
    matches = Analyzer(["foo"], hard=False).analyze("<?php foo(); $y->foo();")
    assert matches == [_soft("foo")]


def test_vendor_is_attached():
    matches = Analyzer(["foo"]).analyze("<?php foo();", Vendor.TWIG)
    assert {m.vendor for m in matches} == {Vendor.TWIG}


def test_resolver_namespace_and_imports():
    resolver = NameResolver("App")
    assert resolver.resolve_function("strlen") == "App\\strlen"
    assert resolver.resolve_function("\\strlen") == "strlen"
    resolver.add_import("class", "Vendor\\Lib", None)
    assert resolver.resolve_class("Lib\\Thing") == "Vendor\\Lib\\Thing"
    assert resolver.resolve_class("self") == "self"


def test_resolver_enter_namespace_clears_imports():
    resolver = NameResolver()
    resolver.add_import("function", "Lib\\go", "run")
    assert resolver.resolve_function("run") == "Lib\\go"
    resolver.enter_namespace("Other")
    assert resolver.resolve_function("run") == "Other\\run"


def test_analyze_file_missing_returns_empty(tmp_path):
    assert analyze_file(tmp_path / "none.php", tmp_path, ["foo"]) == []


def test_analyze_directory(tmp_path):
    sym = tmp_path / "symfony" / "console"
    sym.mkdir(parents=True)
    (sym / "a.php").write_text("<?php foo();")
    other = tmp_path / "acme" / "tool"
    other.mkdir(parents=True)
    (other / "b.php").write_text("<?php foo();")
    (other / "c.txt").write_text("foo();")

    report = analyze_directory(tmp_path, ["foo", "bar"])
    assert report.total_files == 2
    foo = report.results["foo"]
    assert foo.soft_count == foo.hard_count == 2
    assert foo.well_known_vendors == {Vendor.SYMFONY}
    assert report.results["bar"].hard_impact() is ImpactLevel.NONE


def test_analyze_directory_missing_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        analyze_directory(tmp_path / "absent", ["foo"])
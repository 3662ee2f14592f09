from keyword_impact.php_lexer import TokenKind, tokenize


def _names(tokens):
    return [t.value for t in tokens if t.kind is TokenKind.NAME]


def test_html_and_tags():
    tokens = tokenize("<p><?php echo $x; ?>tail")
    assert [t.kind for t in tokens] == [
        TokenKind.INLINE_HTML,
        TokenKind.OPEN_TAG,
        TokenKind.NAME,
        TokenKind.VARIABLE,
        TokenKind.PUNCTUATION,
        TokenKind.CLOSE_TAG,
        TokenKind.INLINE_HTML,
    ]
    assert tokens[-1].value == "tail"


def test_no_open_tag_is_all_html():
    tokens = tokenize("just text foo()")
    assert [t.kind for t in tokens] == [TokenKind.INLINE_HTML]


def test_name_kinds():
    tokens = tokenize("<?php Foo\\Bar \\Baz\\qux plain")
    kinds = {t.value: t.kind for t in tokens}
    assert kinds["Foo\\Bar"] is TokenKind.QUALIFIED_NAME
    assert kinds["\\Baz\\qux"] is TokenKind.FULLY_QUALIFIED_NAME
    assert kinds["plain"] is TokenKind.NAME


def test_strings_and_comments_hide_names():
    tokens = tokenize("<?php 'foo' \"bar\" // baz\n /* qux */ # quux\n real")
    assert _names(tokens) == ["real"]
    assert [t.value for t in tokens if t.kind is TokenKind.STRING] == ["'foo'", '"bar"']


def test_heredoc_is_one_string():
    tokens = tokenize("<?php $a = <<<EOT\nfoo bar\nEOT;\nbaz();")
    assert _names(tokens) == ["baz"]


def test_attribute_opener():
    tokens = tokenize("<?php #[Attr] function f() {}")
    assert "#[" in [t.value for t in tokens if t.kind is TokenKind.PUNCTUATION]
    assert "Attr" in _names(tokens)


def test_offsets_point_into_source():
    source = "<?php namespace A;\nfunction f(int $x) { return $x->y ?? 1.5; } ?>x"
    for token in tokenize(source):
        assert source[token.offset:token.offset + len(token.value)].rstrip() == token.value.rstrip()
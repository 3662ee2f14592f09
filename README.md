# keyword-impact

A tool for anyone drafting a change to the PHP language that adds a new
reserved word. It reports how much existing PHP code in the most popular
Packagist packages already uses that word as a name.

It works in three steps:

1. **Download**: read Packagist's "popular" ranking and select the packages
   in the requested index range. For each one, download the zipball of the
   last version listed in its metadata to
   `<directory>/zipballs/<vendor>/<package>/<vendor>-<package>.zip`.
   A zipball that is already on disk is not downloaded again. Up to 500
   downloads run at the same time. A package that fails is logged and
   counted, and the run continues.
2. **Extract**: unpack every `.zip` under `<directory>/zipballs/` into
   `<directory>/sources/<vendor>/<package>/`. If an archive holds one
   top-level directory, its contents are moved up one level. Packages that
   are already extracted are skipped.
3. **Analyze**: scan every regular `.php`, `.php7` and `.php8` file below
   `<directory>/sources/` and count where each keyword appears as a name.
   Symbolic links are not followed. Bytes that are not valid UTF-8 are
   replaced rather than rejected.

## Installation

```
pip install .
```

To also install what the tests need:

```
pip install ".[test]"
```

## Usage

```
keyword-impact --keyword enum --keyword readonly
```

| Option | Default | Meaning |
| --- | --- | --- |
| `-k`, `--keyword` | required | Keyword to analyze. Repeat the option to analyze several keywords. |
| `--min` | `0` | First package index in the popularity ranking. Counted from 0, inclusive. |
| `--max` | `500` | End of the package range. Counted from 0, exclusive. Must be greater than `--min`. |
| `-d`, `--directory` | `downloads` | Directory that holds the zipballs and the extracted sources. |
| `--skip-download` | off | Skip the download step. Extract and analyze what is already on disk. |
| `--version` | | Print the version and exit. |

Progress and timings are logged to standard error. On failure the command
prints `Error: ...` and exits with status 1.

## Reading the report

The result is a table with one row per keyword. Rows are sorted by hard
impact, then by total count (both highest first), then by keyword.

Keywords are matched without regard to ASCII case. For a qualified name,
only its last segment is compared. Namespace declarations and `use` imports
(including aliases and group imports) are taken into account.

- **Soft**: calls to a function with that name, and declarations of
  functions (not methods) with that name.
- **Hard**: every use of the word as an identifier. This includes function,
  class, constant, method, property and namespace names, and import aliases.
  A function call or declaration therefore counts as both soft and hard.
- **Soft Impact** is rated on the soft count. **Hard Impact** is rated on the
  soft and hard counts added together.
- **Impact** levels: `None` (0), `Low` (1–25), `Medium` (26–100),
  `High` (101–500), `Critical` (more than 500).
- **Well-Known Vendors**: which of symfony, laravel, doctrine, phpunit,
  twig and illuminate have at least one match, or `-` if none do.

If fewer than 200,000 files were analyzed, a warning is printed to
standard error before the table. A larger `--max` gives a more complete
picture.

## Using it from Python

```python
from pathlib import Path

from keyword_impact.analyzer import Analyzer, analyze_directory

report = analyze_directory(Path("downloads/sources"), ["enum", "readonly"])
report.display_table()

matches = Analyzer(["enum"]).analyze("<?php function enum() {} enum();")
```

- `keyword_impact.analyzer`: `analyze_directory`, `analyze_file`, `Analyzer`
  and `NameResolver`.
- `keyword_impact.results`: `AnalysisReport` (with `sorted_rows`,
  `build_table` and `display_table`), `KeywordResult`, `Match`, `Vendor`,
  `ImpactLevel` and `wrap_text`.
- `keyword_impact.downloader`: the coroutines `get_top_packages`,
  `download_package` and `download_packages`. They accept an
  `httpx.AsyncClient` and raise `DownloadError` on failure.
- `keyword_impact.extractor`: `extract_packages`, `extract_zip` and
  `collect_zip_files`.
- `keyword_impact.files`: `walk_files`, `read_file` and `has_php_extension`.
- `keyword_impact.php_lexer`: `tokenize`, which returns `Token` objects
  tagged with a `TokenKind`.

## Limitations

Names are found with a lightweight tokenizer and a few rules about the
tokens around each name. It is not a full PHP parser. Code that depends on
finer grammar details may be counted slightly differently from how PHP
itself would read it. Files are analyzed one after another, in a single
process.
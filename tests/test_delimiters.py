from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from code_lang_check.grammar import LUA, PYTHON, RUST
from code_lang_check.models import SegmentKind
from code_lang_check.tokenizer import find_block_start, find_unescaped

ESCAPES = ("\\\\", '\\"')


def test_find_unescaped_skips_escaped_quotes() -> None:
    text = 'say \\"hi\\" "x"'
    assert find_unescaped(text, '"', 0, ESCAPES) == 11


def test_find_unescaped_escaped_backslash_does_not_escape_quote() -> None:
    text = '"a\\\\" b"'
    assert find_unescaped(text, '"', 1, ESCAPES) == 4


def test_find_unescaped_without_patterns_is_plain_find() -> None:
    assert find_unescaped("abc abc", "abc", 1) == 4
    assert find_unescaped("abc", "zzz") == -1
    assert find_unescaped("abc", "") == -1


def test_lua_block_comment_start() -> None:
    start = find_block_start("--[[ start of a block", LUA)
    assert start is not None
    assert start.kind is SegmentKind.COMMENT
    assert start.offset == 0
    assert start.delimiter.start == "--[["


def test_lua_level_two_block_comment_start() -> None:
    start = find_block_start("--[==[ level two", LUA)
    assert start is not None
    assert start.delimiter.end == "]==]"


def test_line_comment_before_block_start_wins() -> None:
    assert find_block_start("-- plain comment [[ not a block", LUA) is None


def test_string_before_block_start_wins() -> None:
    assert find_block_start('local s = "[[" .. other', LUA) is None


def test_lua_block_string_start() -> None:
    start = find_block_start("local text = [[", LUA)
    assert start is not None
    assert start.kind is SegmentKind.STRING
    assert start.offset == 13
    assert start.content_start == 15


def test_rust_raw_string_start() -> None:
    start = find_block_start('let query = r#"', RUST)
    assert start is not None
    assert start.kind is SegmentKind.STRING
    assert start.delimiter.end == '"#'


def test_rust_block_comment_after_code() -> None:
    start = find_block_start("let x = 1; /* start", RUST)
    assert start is not None
    assert start.kind is SegmentKind.COMMENT
    assert start.offset == 11


def test_python_docstring_ties_with_plain_string() -> None:
    start = find_block_start('    """', PYTHON)
    assert start is not None
    assert start.delimiter.start == '"""'


def test_no_block_start() -> None:
    assert find_block_start("fn main() {}", RUST) is None


def test_closed_string_before_block_start_does_not_shadow_it() -> None:
    start = find_block_start('let s = "x"; /* begin', RUST)
    assert start is not None
    assert start.offset == 13


def test_block_start_inside_open_string_is_ignored() -> None:
    assert find_block_start('let s = "a /* not a comment', RUST) is None


def test_comment_delimiter_inside_closed_string_is_ignored() -> None:
    start = find_block_start('let url = "http://x"; /* begin', RUST)
    assert start is not None
    assert start.offset == 22


def test_rust_lifetimes_do_not_open_strings() -> None:
    start = find_block_start("impl<'a> Parser<'a> { /* parses", RUST)
    assert start is not None
    assert start.offset == 22

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from code_lang_check.grammar import LUA, PYTHON, RUST
from code_lang_check.models import SegmentKind
from code_lang_check.tokenizer import split_source_lines, tokenize_file, tokenize_text

COMMENT_BLOCK_BODY = [
    "This is multi commmented line.",
    "Multiple having or invoving several parts, elements, or members.",
    "",
    "a shop with brances in many places, especialy one selling a specific type of prduct.",
]


def _rust_comment_block() -> str:
    body = list(COMMENT_BLOCK_BODY)
    body[0] = "/*" + body[0]
    body[-1] = body[-1] + "*/"
    return "\n".join(body) + "\n"


def test_rust_block_comment_text_and_lines(tmp_path: Path) -> None:
    source = tmp_path / "comment_block.rs"
    source.write_text(_rust_comment_block(), encoding="utf-8")

    code_file = tokenize_file(source, RUST)

    assert code_file.segments == []
    assert len(code_file.blocks) == 1
    block = code_file.blocks[0]
    assert block.kind is SegmentKind.COMMENT
    assert block.text == "\n".join(COMMENT_BLOCK_BODY)
    assert [line.line_number for line in block.lines] == [1, 2, 3, 4]
    assert block.delimiter.start == "/*"
    assert block.hash != 0


def test_block_offsets_locate_constituent_lines() -> None:
    code_file = tokenize_text(_rust_comment_block(), RUST)
    block = code_file.blocks[0]

    assert block.line_for_offset(block.text.index("commmented")).line_number == 1
    assert block.line_for_offset(block.text.index("invoving")).line_number == 2
    assert block.line_for_offset(block.text.index("prduct")).line_number == 4


def test_block_with_delimiters_on_their_own_lines() -> None:
    text = "/*\n    indented first\n    second line\n*/\nfn main() {}\n"

    code_file = tokenize_text(text, RUST)

    block = code_file.blocks[0]
    assert block.text == "indented first\nsecond line"
    assert len(block.lines) == 4
    assert block.line_for_offset(0).line_number == 2
    assert block.line_for_offset(block.text.index("second")).line_number == 3
    assert [s.text for s in code_file.segments] == ["main"]


def test_indented_block_bodies_are_trimmed_per_line() -> None:
    text = "    /*\n     * first lien here\n     * secnd line here\n     */\n"

    block = tokenize_text(text, RUST).blocks[0]

    assert block.text == "* first lien here\n* secnd line here"
    assert block.line_for_offset(block.text.index("lien")).line_number == 2
    assert block.line_for_offset(block.text.index("secnd")).line_number == 3


def test_closed_string_before_block_comment_does_not_block_it() -> None:
    text = 'let s = "x"; /* begin of\nsecond comment line\nend */\n'

    code_file = tokenize_text(text, RUST)

    assert [(b.kind, b.text) for b in code_file.blocks] == [
        (SegmentKind.COMMENT, "begin of\nsecond comment line\nend")
    ]
    assert [line.line_number for line in code_file.blocks[0].lines] == [1, 2, 3]
    assert all(s.line.line_number == 1 for s in code_file.segments)


def test_block_string_after_closed_string_argument() -> None:
    text = 'call("arg", """first\nsecond line here\n""")\nvalue = compute()\n'

    code_file = tokenize_text(text, PYTHON)

    assert [(b.kind, b.text) for b in code_file.blocks] == [
        (SegmentKind.STRING, "first\nsecond line here")
    ]
    assert [(s.line.line_number, s.text) for s in code_file.segments] == [
        (1, "arg"),
        (1, "call"),
        (4, "value compute"),
    ]


def test_rust_lifetime_before_block_comment() -> None:
    text = "impl<'a> Parser<'a> { /* parses the\ninput stream */\n"

    code_file = tokenize_text(text, RUST)

    assert [b.text for b in code_file.blocks] == ["parses the\ninput stream"]


def test_lua_block_comment_strips_trailing_comment_delimiter() -> None:
    text = "--[[\nThis is multi commmented line.\n--]]\nlocal value = computeTotal()\n"

    code_file = tokenize_text(text, LUA)

    assert [b.text for b in code_file.blocks] == ["This is multi commmented line."]
    assert [(s.kind, s.line.line_number, s.text) for s in code_file.segments] == [
        (SegmentKind.CODE, 4, "value compute Total")
    ]


def test_lua_level_one_block_uses_matching_end() -> None:
    text = "--[=[\nkeeps ]] inside\n]=]\n"

    code_file = tokenize_text(text, LUA)

    assert [b.text for b in code_file.blocks] == ["keeps ]] inside"]


def test_lua_block_string() -> None:
    text = "local help = [[\nUsage: run the comand\n]]\n"

    code_file = tokenize_text(text, LUA)

    assert len(code_file.blocks) == 1
    assert code_file.blocks[0].kind is SegmentKind.STRING
    assert code_file.blocks[0].text == "Usage: run the comand"
    assert [s.text for s in code_file.segments] == ["help"]


def test_rust_raw_string_block() -> None:
    text = 'let query = r#"\nselect the "name"\nfrom table\n"#;\n'

    code_file = tokenize_text(text, RUST)

    assert [b.text for b in code_file.blocks] == ['select the "name"\nfrom table']
    assert code_file.blocks[0].delimiter.end == '"#'


def test_code_before_block_on_same_line_is_extracted() -> None:
    text = "let total = 1; /* starts here\nends */\n"

    code_file = tokenize_text(text, RUST)

    assert [b.text for b in code_file.blocks] == ["starts here\nends"]
    assert [(s.line.line_number, s.text) for s in code_file.segments] == [(1, "total")]


def test_self_terminating_block_is_single_line() -> None:
    code_file = tokenize_text("/* one line */ let value = 2;\n", RUST)

    assert code_file.blocks == []
    assert [(s.kind, s.text) for s in code_file.segments] == [
        (SegmentKind.COMMENT, "one line"),
        (SegmentKind.CODE, "value"),
    ]


def test_python_docstring_block() -> None:
    text = 'def compute():\n    """\n    Docstring body line.\n    """\n'

    code_file = tokenize_text(text, PYTHON)

    assert [b.text for b in code_file.blocks] == ["Docstring body line."]
    assert code_file.blocks[0].kind is SegmentKind.STRING
    assert [s.text for s in code_file.segments] == ["compute"]


def test_unclosed_block_is_dropped(caplog) -> None:
    code_file = tokenize_text("fn main() {}\n/* never closed\nmore text\n", RUST)

    assert code_file.blocks == []
    assert [s.text for s in code_file.segments] == ["main"]
    assert "unclosed" in caplog.text


def test_blank_lines_skipped_outside_blocks_and_kept_inside() -> None:
    text = "\n\n// first comment\n\n/*\nalpha\n\nbeta\n*/\n"

    code_file = tokenize_text(text, RUST)

    assert [(s.line.line_number, s.text) for s in code_file.segments] == [(3, "first comment")]
    assert code_file.blocks[0].text == "alpha\n\nbeta"


def test_segments_are_ordered_by_line() -> None:
    lines = [f"// comment number {index}" for index in range(1, 40)]

    code_file = tokenize_text("\n".join(lines), RUST, max_workers=4)

    assert [s.line.line_number for s in code_file.segments] == list(range(1, 40))


def test_tokenize_file_missing_path_returns_empty(tmp_path: Path) -> None:
    code_file = tokenize_file(tmp_path / "missing.rs", RUST)

    assert code_file.is_empty
    assert code_file.lines == []


def test_tokenize_file_invalid_utf8_returns_empty(tmp_path: Path) -> None:
    source = tmp_path / "binary.rs"
    source.write_bytes(b"\xff\xfe// bad\n")

    assert tokenize_file(source, RUST).is_empty


def test_split_source_lines_is_one_based_and_strips_carriage_returns() -> None:
    lines = split_source_lines("first\r\nsecond\n")

    assert [(line.line_number, line.text) for line in lines] == [(1, "first"), (2, "second")]
    assert lines[0].content_hash != 0


def test_hash_depends_only_on_content() -> None:
    first = tokenize_text("// same text here\n", RUST).segments[0]
    second = tokenize_text("\n\n// same text here\n", RUST).segments[0]

    assert first.hash == second.hash
    assert first.line.line_number != second.line.line_number

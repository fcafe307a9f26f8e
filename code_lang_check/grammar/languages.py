"""Built-in language grammars.

Block delimiter variants are listed in the order they are tried; the first
declared variant found in a line wins.
"""

from __future__ import annotations

from pathlib import Path

from code_lang_check.models import NamingConvention

from .language_grammar import DelimiterPair, LanguageGrammar, StringSyntax

_BACKSLASH = "\\\\"

LUA = LanguageGrammar(
    name="lua",
    extensions=(".lua",),
    comment_delimiter="--",
    block_comments=(
        DelimiterPair("--[[", "]]"),
        DelimiterPair("--[=[", "]=]"),
        DelimiterPair("--[==[", "]==]"),
        DelimiterPair("--[===[", "]===]"),
    ),
    strings=(
        StringSyntax('"', (_BACKSLASH, '\\"')),
        StringSyntax("'", (_BACKSLASH, "\\'")),
    ),
    block_strings=(
        DelimiterPair("[[", "]]"),
        DelimiterPair("[=[", "]=]"),
        DelimiterPair("[==[", "]==]"),
        DelimiterPair("[===[", "]===]"),
    ),
    reserved_keywords=frozenset(
        {
            "and", "break", "do", "else", "elseif", "end", "false", "for",
            "function", "goto", "if", "in", "local", "nil", "not", "or",
            "repeat", "return", "then", "true", "until", "while",
        }
    ),
    operators=(
        "_", "+", "-", "*", "/", "%", "=", "'", '"', "~", ">", "<", "^",
        "/=", "%=", "(", ")", "[", "]", "{", "}", ";", ":", ",", "..", ".", "#",
    ),
    naming_conventions=(NamingConvention.CAMEL_CASE, NamingConvention.PASCAL_CASE),
)

RUST = LanguageGrammar(
    name="rust",
    extensions=(".rs",),
    comment_delimiter="//",
    block_comments=(DelimiterPair("/*", "*/"),),
    strings=(
        StringSyntax('"', (_BACKSLASH, '\\"')),
        StringSyntax("'", (_BACKSLASH, "\\'")),
    ),
    block_strings=(
        DelimiterPair('r#"', '"#'),
        DelimiterPair('r##"', '"##'),
        DelimiterPair('r###"', '"###'),
        DelimiterPair('r####"', '"####'),
    ),
    reserved_keywords=frozenset(
        {
            "as", "async", "await", "break", "const", "continue", "crate", "dyn",
            "else", "enum", "extern", "false", "fn", "for", "if", "impl", "in",
            "let", "loop", "match", "mod", "move", "mut", "pub", "ref", "return",
            "Self", "self", "static", "struct", "super", "trait", "true", "type",
            "unsafe", "use", "where", "while", "str", "usize", "isize", "bool",
            "i8", "i16", "i32", "i64", "i128", "u8", "u16", "u32", "u64", "u128",
            "f32", "f64", "char",
        }
    ),
    operators=(
        "_", "+", "-", "*", "/", "%", "=", '"', "!", ">", "<", "&", "|", "'",
        "^", "/=", "%=", "(", ")", "{", "}", "[", "]", ";", ":", ",", "..", ".",
        "#", "?",
    ),
    naming_conventions=(NamingConvention.PASCAL_CASE, NamingConvention.SNAKE_CASE),
    prefilter_tokens=("&'", "<'"),
)

PYTHON = LanguageGrammar(
    name="python",
    extensions=(".py", ".pyi"),
    comment_delimiter="#",
    strings=(
        StringSyntax('"', (_BACKSLASH, '\\"')),
        StringSyntax("'", (_BACKSLASH, "\\'")),
    ),
    block_strings=(
        DelimiterPair('"""', '"""'),
        DelimiterPair("'''", "'''"),
    ),
    reserved_keywords=frozenset(
        {
            "False", "None", "True", "and", "as", "assert", "async", "await",
            "break", "class", "continue", "def", "del", "elif", "else", "except",
            "finally", "for", "from", "global", "if", "import", "in", "is",
            "lambda", "nonlocal", "not", "or", "pass", "raise", "return", "try",
            "while", "with", "yield", "self", "cls", "str", "int", "float",
            "bool", "list", "dict", "set", "tuple",
        }
    ),
    operators=(
        "_", "+", "-", "*", "/", "%", "=", '"', "'", "!", ">", "<", "&", "|",
        "^", "~", "(", ")", "{", "}", "[", "]", ";", ":", ",", ".", "@", "#",
    ),
    naming_conventions=(NamingConvention.SNAKE_CASE, NamingConvention.PASCAL_CASE),
)

JAVASCRIPT = LanguageGrammar(
    name="javascript",
    extensions=(".js", ".mjs", ".cjs"),
    comment_delimiter="//",
    block_comments=(DelimiterPair("/*", "*/"),),
    strings=(
        StringSyntax('"', (_BACKSLASH, '\\"')),
        StringSyntax("'", (_BACKSLASH, "\\'")),
    ),
    block_strings=(DelimiterPair("`", "`"),),
    reserved_keywords=frozenset(
        {
            "await", "break", "case", "catch", "class", "const", "continue",
            "debugger", "default", "delete", "do", "else", "export", "extends",
            "false", "finally", "for", "function", "if", "import", "in",
            "instanceof", "let", "new", "null", "return", "super", "switch",
            "this", "throw", "true", "try", "typeof", "undefined", "var", "void",
            "while", "with", "yield", "async", "static",
        }
    ),
    operators=(
        "_", "+", "-", "*", "/", "%", "=", '"', "'", "`", "!", ">", "<", "&",
        "|", "^", "~", "?", "(", ")", "{", "}", "[", "]", ";", ":", ",", ".",
        "$",
    ),
    naming_conventions=(NamingConvention.CAMEL_CASE, NamingConvention.PASCAL_CASE),
)

GRAMMARS: tuple[LanguageGrammar, ...] = (LUA, RUST, PYTHON, JAVASCRIPT)


def grammar_for_path(path: Path | str) -> LanguageGrammar | None:
    """Return the grammar registered for ``path``'s extension, if any."""

    suffix = Path(path).suffix.lower()
    if not suffix:
        return None
    for grammar in GRAMMARS:
        if suffix in grammar.extensions:
            return grammar
    return None


def grammar_by_name(name: str) -> LanguageGrammar | None:
    lowered = name.strip().lower()
    for grammar in GRAMMARS:
        if grammar.name == lowered:
            return grammar
    return None

"""Configuration for language checking rules and ignored words.

This module defines the default LanguageTool rules to disable and the words
to ignore when checking comments, strings and identifiers in source code.
"""

# Default rules to disable. Source comments are terse fragments, so sentence
# level rules fire on almost every line.
DEFAULT_DISABLED_RULES = {
    "WHITESPACE_RULE",
    "CONSECUTIVE_SPACES",
    "SENTENCE_WHITESPACE",
    "UPPERCASE_SENTENCE_START",
    "COMMA_PARENTHESIS_WHITESPACE",
    "PUNCTUATION_PARAGRAPH_END",
    "EN_UNPAIRED_BRACKETS",
    "EN_UNPAIRED_QUOTES",
    "DASH_RULE",
    "ENGLISH_WORD_REPEAT_BEGINNING_RULE",
}


# Default words to ignore (case-sensitive).
DEFAULT_IGNORED_WORDS = {
    # --- Language / runtime names ---
    "Lua", "LuaJIT", "Rust", "Neovim", "nvim", "Vim", "JavaScript", "TypeScript",

    # --- Common identifier fragments ---
    "args", "argv", "async", "bool", "buf", "config", "ctx", "dict", "enum",
    "env", "impl", "init", "iter", "len", "lib", "param", "params", "regex",
    "stderr", "stdin", "stdout", "str", "struct", "tmp", "utf", "vec",

    # --- Protocols / formats ---
    "API", "CLI", "CSV", "HTTP", "HTTPS", "JSON", "TOML", "UTF", "URL", "YAML",

    # --- Tooling ---
    "LanguageTool", "pytest", "cargo",
}


# Categories that survive the Code-origin filter. Identifiers decomposed into
# words only make sense as spelling candidates.
SPELLING_CATEGORIES = {"TYPOS"}

# Maximum suggestions kept per diagnostic.
MAX_OPTIONS = 20

# Maximum comment/string extraction passes on one line.
MAX_PEELS_PER_LINE = 20

# Leading word sent before Code text so a decomposed identifier never starts
# the "sentence" (avoids capitalisation rules on the first word).
CODE_SENTINEL = "Ignore "

# LanguageTool rules that flag an immediately repeated word.
REPETITION_RULE_IDS = {
    "ENGLISH_WORD_REPEAT_RULE",
    "WORD_REPEAT_RULE",
}

REPETITION_SHORT_MESSAGE = "Word repetition"

# Joins texts for a single ``check_many`` request. Blank lines end a paragraph
# so no rule matches across two texts.
CHECK_MANY_SEPARATOR = "\n\n"

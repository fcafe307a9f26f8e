"""Tokenizer: source file -> Code/Comment/String segments and blocks."""

from __future__ import annotations

from .code_file import CodeFile, split_source_lines, tokenize_file, tokenize_lines, tokenize_text
from .delimiters import BlockStart, find_block_start, find_unescaped
from .line_extractor import extract_line_segments
from .normalizer import normalize_code, split_identifier

__all__ = [
    "BlockStart",
    "CodeFile",
    "extract_line_segments",
    "find_block_start",
    "find_unescaped",
    "normalize_code",
    "split_identifier",
    "split_source_lines",
    "tokenize_file",
    "tokenize_lines",
    "tokenize_text",
]

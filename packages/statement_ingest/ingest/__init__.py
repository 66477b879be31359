"""Statement file loading and raw-row extraction."""

from .utils import check_statement_file, head_lines, iter_raw_rows, load_statement_text

__all__ = ["check_statement_file", "head_lines", "iter_raw_rows", "load_statement_text"]

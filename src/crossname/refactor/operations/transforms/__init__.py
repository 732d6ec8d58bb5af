from .rewriter import LineEdit, OccurrenceRewriter, RewriteResult, split_lines

__all__ = ["LineEdit", "OccurrenceRewriter", "RewriteResult", "split_lines"]

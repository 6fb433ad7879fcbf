from .line_parser import has_unclosed_tag, is_task_line, parse_line, split_tags, strip_decoration

__all__ = [
    "parse_line",
    "is_task_line",
    "split_tags",
    "strip_decoration",
    "has_unclosed_tag",
]

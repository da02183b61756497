"""
Content cleaning for generated articles.

Removes prompt-template scaffolding from LLM output before it is copied,
exported or published:

1. Drop every line that fully matches a scaffold pattern
2. Optionally drop a duplicated title at the top of the text
3. Collapse runs of blank lines into one
4. Trim leading and trailing blank space

Cleaning is pure and total (any string in, a string out) and idempotent:
clean(clean(x)) == clean(x).
"""

from typing import Iterable, List, Optional
import re

from content_assistant.cleaning.patterns import DEFAULT_SCAFFOLD_PATTERNS, ScaffoldPattern


class ContentCleaner:
    """
    Line-oriented scaffold filter.
    
    Usage:
        cleaner = ContentCleaner()
        text = cleaner.clean(draft.content, title=draft.title)
    """
    
    def __init__(self, patterns: Iterable[ScaffoldPattern] = DEFAULT_SCAFFOLD_PATTERNS):
        self.patterns = tuple(patterns)
        self._compiled = [(p.name, p.compile()) for p in self.patterns]
    
    def match(self, line: str) -> Optional[str]:
        """Return the name of the first pattern matching the whole line, if any."""
        text = line.strip()
        for name, regex in self._compiled:
            if regex.fullmatch(text):
                return name
        return None
    
    def is_scaffold(self, line: str) -> bool:
        return self.match(line) is not None
    
    def clean(self, raw_text: Optional[str], title: Optional[str] = None) -> str:
        """
        Clean generated article text.
        
        Args:
            raw_text: Raw generator output (None is treated as empty).
            title: Article title; when given, copies of it at the top of
                the text are removed.
            
        Returns:
            Cleaned text with no scaffold lines, no consecutive blank
            lines and no leading/trailing blank space.
        """
        if not raw_text:
            return ""
        
        lines = [line for line in raw_text.split("\n") if not self.is_scaffold(line)]
        
        if title and title.strip():
            lines = self._drop_leading_titles(lines, title.strip())
        
        return "\n".join(collapse_blank_lines(lines)).strip()
    
    @staticmethod
    def _drop_leading_titles(lines: List[str], title: str) -> List[str]:
        # Everything before the first non-blank, non-title line counts as leading
        result = []
        leading = True
        for line in lines:
            if leading and line.strip():
                if is_title_line(line, title):
                    continue
                leading = False
            result.append(line)
        return result


_HEADING_MARK = re.compile(r"^#{1,6}\s+")


def _unbold(text: str) -> str:
    if len(text) > 4 and text.startswith("**") and text.endswith("**"):
        return text[2:-2].strip()
    return text


def is_title_line(line: str, title: str) -> bool:
    """True if the line is exactly the title: plain, a `#` heading or **bold**."""
    text = line.strip()
    title = title.strip()
    return title in (_unbold(text), _unbold(_HEADING_MARK.sub("", text)))


def collapse_blank_lines(lines: Iterable[str]) -> List[str]:
    """Keep only the first of any run of blank (whitespace-only) lines."""
    result: List[str] = []
    for line in lines:
        if not line.strip() and result and not result[-1].strip():
            continue
        result.append(line)
    return result


_default_cleaner: Optional[ContentCleaner] = None


def get_cleaner() -> ContentCleaner:
    """Get the shared cleaner built from the default patterns."""
    global _default_cleaner
    if _default_cleaner is None:
        _default_cleaner = ContentCleaner()
    return _default_cleaner


def clean_article_content(raw_text: Optional[str], title: Optional[str] = None) -> str:
    """Clean text with the default scaffold patterns."""
    return get_cleaner().clean(raw_text, title=title)

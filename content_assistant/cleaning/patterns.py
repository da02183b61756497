"""
Scaffold line patterns.

Each pattern describes one kind of leftover prompt-template line. Patterns
are matched against the whole line after surrounding whitespace is
removed, so indentation copied from the prompt does not matter. Supporting
a new template means adding entries here; the cleaner itself never changes.
"""

from dataclasses import dataclass
from typing import Pattern, Tuple
import re


@dataclass(frozen=True)
class ScaffoldPattern:
    """A named full-line regular expression for one scaffold line shape."""

    name: str
    expression: str

    def compile(self) -> Pattern[str]:
        return re.compile(self.expression)


# Bracketed instruction body, e.g. "[Generate a brief final summary.]"
_INSTRUCTION = r"\[Generate\b[^\]]*\]"


DEFAULT_SCAFFOLD_PATTERNS: Tuple[ScaffoldPattern, ...] = (
    # Markdown horizontal rules
    ScaffoldPattern("separator", r"(?:-{3,}|\*{3,}|_{3,})"),

    # Template greeting
    ScaffoldPattern("greeting", r"Hey, fellow entrepreneurs!"),

    # Whole-line instructions, plain or bold
    ScaffoldPattern("placeholder", _INSTRUCTION),
    ScaffoldPattern("bold_placeholder", r"\*\*" + _INSTRUCTION + r"\*\*"),

    # Section lead-ins that still carry their instruction
    ScaffoldPattern("challenge_lead_in", r"\*\*The Challenge:\*\*\s*" + _INSTRUCTION),
    ScaffoldPattern("conclusion_lead_in", r"\*\*Conclusion:\*\*\s*" + _INSTRUCTION),

    # Section headers emitted verbatim from the template
    ScaffoldPattern("resources_header", r"\*\*Free/Low-Cost Resources Mentioned:\*\*"),
    ScaffoldPattern("your_turn_header", r"\*\*Your Turn:\*\*"),

    # Formatting guidance bullets
    ScaffoldPattern(
        "steps_bullet",
        r"\* \*\*Step-by-Step or Key Points:\*\* Break down information into easy-to-follow sections\.",
    ),
    ScaffoldPattern(
        "examples_bullet",
        r"\* \*\*Brief Examples/Hypothetical Cases:\*\* Illustrate points with scenarios that resonate with entrepreneurs\.",
    ),
    ScaffoldPattern(
        "pro_tip_bullet",
        r"\* \*\*Pro-Tip/Common Pitfalls:\*\* Share warnings and shortcuts based on experience\.",
    ),

    # Resource placeholders and their disclaimer
    ScaffoldPattern(
        "resource_placeholder",
        r"(?:[*-]\s+)?\[Resource \d+\]: Brief description and why it's valuable\.",
    ),
    ScaffoldPattern(
        "resource_disclaimer",
        r"\(Ensure these are resources from reliable companies and mostly free or low-cost\)\.",
    ),
)

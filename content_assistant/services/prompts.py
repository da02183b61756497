"""
Prompt builders for idea and article generation.

The article prompt embeds ARTICLE_TEMPLATE; its bracketed instructions and
literal headers are exactly what the cleaning patterns strip when the model
echoes them back.
"""

from typing import Iterable, Optional, Sequence

from content_assistant.config import AssistantConfig
from content_assistant.models.idea import Idea


IDEAS_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "title": {"type": "string"},
            "flair": {"type": "string"},
        },
        "required": ["title", "flair"],
    },
}


ARTICLE_TEMPLATE = """\
**{title}**

Hey, fellow entrepreneurs!

[Generate a brief and catchy introduction here, grabbing attention and presenting the problem/benefit.]

**The Challenge:** [Generate content here that contextualizes the common situation small businesses face.]

**[Generate a compelling subtitle for the Solution/Guide - IN BOLD]**

[Generate the content for the "Solution" with practical tactics, tips, and strategies. Use bullet points for steps or key takeaways.]
* **Step-by-Step or Key Points:** Break down information into easy-to-follow sections.
* **Brief Examples/Hypothetical Cases:** Illustrate points with scenarios that resonate with entrepreneurs.
* **Pro-Tip/Common Pitfalls:** Share warnings and shortcuts based on experience.

**Free/Low-Cost Resources Mentioned:**

* [Resource 1]: Brief description and why it's valuable.
* [Resource 2]: Brief description and why it's valuable.
(Ensure these are resources from reliable companies and mostly free or low-cost).

**Your Turn:**

[Generate a Call-to-Action (CTA) here to encourage the community to comment, share experiences, or ask questions.]

**Conclusion:** [Generate a brief final summary of the benefit or main idea.]"""


def _flair_lines(flairs: Iterable[str]) -> str:
    return "\n".join(f"- {flair}" for flair in flairs)


def build_ideas_prompt(
    config: AssistantConfig,
    trend_titles: Optional[Sequence[str]] = None,
) -> str:
    """Build the prompt requesting a JSON list of {title, flair} ideas."""
    trends_section = ""
    if trend_titles:
        titles = "\n".join(f"- {t}" for t in list(trend_titles)[: max(config.trend_limit, 0)])
        if titles:
            trends_section = f"""
Recent popular posts in r/{config.subreddit} (use them as inspiration, do not copy them):
{titles}
"""
    
    return f"""Generate {config.ideas_per_request} attractive and valuable article title ideas for a Reddit community named r/{config.subreddit}, focused on {config.community_focus}. Articles should be practical and actionable.
{trends_section}
Assign each idea to one of the following flairs:
{_flair_lines(config.flairs)}

Output format JSON:
[
    {{ "title": "Idea Title 1", "flair": "Corresponding Flair" }},
    {{ "title": "Idea Title 2", "flair": "Corresponding Flair" }},
    ...
]"""


def build_article_prompt(config: AssistantConfig, idea: Idea) -> str:
    """Build the long-form article prompt for an approved idea."""
    structure = ARTICLE_TEMPLATE.format(title=idea.title)
    
    return f"""Write a detailed and valuable article in ENGLISH for the Reddit community r/{config.subreddit}, with the title "**{idea.title}**" and under the flair "{idea.flair}".
The article must be practical, actionable, and focused on {config.community_focus}.
Ensure that the main article title and ALL subtitles within the body of the article are in **bold Markdown** (using **text**).
Make the language engaging, conversational, and easy to read. Use varied sentence structures and clear, concise points.
Do NOT include any bracketed instructions like "[Generate content here]" or "---" separators in the final article output. Generate the actual content directly for each section.

Follow this structure:

{structure}

The content should be attractive, easy to read, and highly useful. The tone should be optimistic and empowering."""

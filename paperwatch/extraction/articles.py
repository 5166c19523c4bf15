import math
import re
from dataclasses import dataclass
from typing import Callable, List, Optional
from bs4.element import Tag


WHITESPACE = re.compile(r'\s+')


@dataclass
class ExtractedArticle:
    title: str
    html_content: str
    estimated_tokens: int
    journal: Optional[str] = None
    authors: Optional[str] = None
    abstract: Optional[str] = None
    doi: Optional[str] = None


def estimate_tokens(text: str) -> int:
    """Rough token count, about 4 characters per token."""
    return math.ceil(len(text) / 4)


def make_article(title: str, html_content: str,
                 token_source: Optional[str] = None,
                 **fields: Optional[str]) -> ExtractedArticle:
    # empty strings become None so optional fields stay unset
    fields = {key: value or None for key, value in fields.items()}
    return ExtractedArticle(
        title=title,
        html_content=html_content,
        estimated_tokens=estimate_tokens(
            html_content if token_source is None else token_source
        ),
        **fields
    )


def clean_text(text: str) -> str:
    return WHITESPACE.sub(' ', text).strip()


def inner_html(tag: Optional[Tag]) -> str:
    if tag is None:
        return ''
    return tag.decode_contents()


def closest(tag: Optional[Tag], names: List[str]) -> Optional[Tag]:
    """The tag itself or its nearest ancestor with one of the names."""
    if tag is None or tag.name in names:
        return tag
    return tag.find_parent(names)


def style_of(tag: Tag) -> str:
    return tag.get('style') or ''


def classes_of(tag: Tag) -> str:
    value = tag.get('class') or []
    if isinstance(value, str):
        return value
    return ' '.join(value)


def has_style(tag: Tag, *declarations: str) -> bool:
    """
    True when any of the CSS declarations is present, with or without
    a space after the colon.
    """
    style = style_of(tag)
    for declaration in declarations:
        prop, value = declaration.split(':', 1)
        value = value.strip()
        if f'{prop}: {value}' in style or f'{prop}:{value}' in style:
            return True
    return False


def deduplicate(articles: List[ExtractedArticle],
                key: Callable[[str], str] = lambda t: t.lower().strip())\
        -> List[ExtractedArticle]:
    """Keep the first article for every title key."""
    seen = set()
    unique = []
    for article in articles:
        title_key = key(article.title)
        if title_key not in seen:
            seen.add(title_key)
            unique.append(article)
    return unique

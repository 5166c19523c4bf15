"""
Module contains text normalization helpers shared by title matching
and article extraction.
"""
import re
from typing import Iterable, List


STOP_WORDS = frozenset([
    'a', 'an', 'the', 'and', 'or', 'in', 'on',
    'at', 'to', 'for', 'of', 'with', 'by'
])
MIN_KEYWORD_LENGTH = 4

ENTITIES = {
    '&amp;': '&',
    '&nbsp;': ' '
}
TAG_PATTERN = re.compile(r'<[^>]+>')
ANGLE_BRACKET_PATTERN = re.compile(r'[<>]')
WHITESPACE_PATTERN = re.compile(r'\s+')


def decode_entities(text: str) -> str:
    """
    Decode '&amp;' and '&nbsp;' until nothing is left to decode,
    so '&amp;amp;' ends up as '&' in a single call.
    """
    previous = None
    while previous != text:
        previous = text
        for entity, replacement in ENTITIES.items():
            text = text.replace(entity, replacement)
    return text


def strip_tags(text: str) -> str:
    text = TAG_PATTERN.sub(' ', text)
    return ANGLE_BRACKET_PATTERN.sub(' ', text)


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_PATTERN.sub(' ', text).strip()


def normalize_text(text: str) -> str:
    """
    Canonical form of a piece of email text: lowercase, entities decoded,
    tags replaced with spaces, whitespace collapsed.

    Normalizing an already normalized string returns it unchanged.
    """
    if not text:
        return ''
    text = decode_entities(text.lower())
    return collapse_whitespace(strip_tags(text))


def extract_keywords(title: str,
                     stop_words: Iterable[str] = STOP_WORDS,
                     min_length: int = MIN_KEYWORD_LENGTH) -> List[str]:
    """
    Significant words of a title in their original order.
    Duplicates are kept.
    """
    stop_words = {word.lower() for word in stop_words}
    return [
        token for token in normalize_text(title).split()
        if len(token) >= min_length and token not in stop_words
    ]


def html_to_plain_text(html: str) -> str:
    """
    Readable version of an HTML chunk which keeps the original case.
    """
    return collapse_whitespace(TAG_PATTERN.sub(' ', html))


def build_corpus(texts: Iterable[str]) -> str:
    return ' '.join(normalize_text(text) for text in texts)

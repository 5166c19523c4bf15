from enum import Enum
from dataclasses import dataclass, field
from typing import Iterable, List, Optional
from paperwatch.core.normalization import (normalize_text, extract_keywords,
                                           STOP_WORDS, MIN_KEYWORD_LENGTH)


MATCH_THRESHOLD = 0.7
CONTEXT_BEFORE = 50
CONTEXT_AFTER = 150


class MatchKind(Enum):
    EXACT = 'exact'
    PARTIAL = 'partial'
    NONE = 'none'


@dataclass(frozen=True)
class MatchResult:
    kind: MatchKind
    ratio: float = 0.0
    keywords: List[str] = field(default_factory=list)
    matched_keywords: List[str] = field(default_factory=list)
    # only filled for NONE results
    context: Optional[str] = None

    @property
    def context_keyword(self) -> Optional[str]:
        if self.context is None or not self.keywords:
            return None
        return self.keywords[0]


class TitleMatcher:
    """
    Decides whether a title reported by the extraction step is backed by
    the text of the source emails.

    The corpus passed to `match` must already be normalized,
    see `paperwatch.core.normalization.build_corpus`.
    """
    def __init__(self, threshold: float = MATCH_THRESHOLD,
                 stop_words: Iterable[str] = STOP_WORDS,
                 min_keyword_length: int = MIN_KEYWORD_LENGTH,
                 context_before: int = CONTEXT_BEFORE,
                 context_after: int = CONTEXT_AFTER) -> None:
        if not 0 <= threshold <= 1:
            raise ValueError('threshold must lie in the interval [0, 1]')
        if context_before < 0 or context_after < 0:
            raise ValueError('context bounds must be non-negative')

        self.threshold = threshold
        self.stop_words = frozenset(word.lower() for word in stop_words)
        self.min_keyword_length = min_keyword_length
        self.context_before = context_before
        self.context_after = context_after

    def keywords(self, title: str) -> List[str]:
        return extract_keywords(title, self.stop_words,
                                self.min_keyword_length)

    def excerpt(self, corpus: str, word: str) -> Optional[str]:
        idx = corpus.find(word)
        if idx < 0:
            return None
        start = max(0, idx - self.context_before)
        return corpus[start: idx + self.context_after]

    def match(self, title: str, corpus: str) -> MatchResult:
        normalized_title = normalize_text(title)
        # an empty title is a substring of anything and proves nothing
        if normalized_title and normalized_title in corpus:
            return MatchResult(MatchKind.EXACT, ratio=1.0)

        keywords = self.keywords(title)
        matched = [kw for kw in keywords if kw in corpus]
        ratio = len(matched) / max(len(keywords), 1)

        if keywords and ratio >= self.threshold:
            return MatchResult(MatchKind.PARTIAL, ratio=ratio,
                               keywords=keywords, matched_keywords=matched)

        context = self.excerpt(corpus, keywords[0]) if keywords else None
        return MatchResult(MatchKind.NONE, ratio=ratio, keywords=keywords,
                           matched_keywords=matched, context=context)

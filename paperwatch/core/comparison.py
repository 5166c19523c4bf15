"""
Module contains the batch comparison of extracted paper titles against
the text of the emails they were extracted from. Titles without textual
support are possible hallucinations of the extraction step.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
import pandas as pd
from tqdm import tqdm
from paperwatch.core.data import Email, Paper
from paperwatch.core.matcher import (MatchKind, MatchResult, TitleMatcher,
                                     MATCH_THRESHOLD, CONTEXT_BEFORE,
                                     CONTEXT_AFTER)
from paperwatch.core.normalization import (normalize_text, STOP_WORDS,
                                           MIN_KEYWORD_LENGTH)
from paperwatch.utils import create_logger


BAR_FORMAT = '{desc:<20} {percentage:3.0f}%|{bar:20}{r_bar}'
RULE_WIDTH = 100
REPORT_KEYWORDS = 5
CONTEXT_PREVIEW = 100


@dataclass
class MatchSummary:
    exact: int = 0
    partial: int = 0
    none: int = 0

    @property
    def total(self) -> int:
        return self.exact + self.partial + self.none

    def add(self, result: MatchResult) -> None:
        if result.kind == MatchKind.EXACT:
            self.exact += 1
        elif result.kind == MatchKind.PARTIAL:
            self.partial += 1
        else:
            self.none += 1

    def count(self, kind: MatchKind) -> int:
        return {
            MatchKind.EXACT: self.exact,
            MatchKind.PARTIAL: self.partial,
            MatchKind.NONE: self.none
        }[kind]

    def percentage(self, kind: MatchKind) -> float:
        if not self.total:
            return 0.0
        return self.count(kind) / self.total * 100

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {'match': kind.value,
                 'count': self.count(kind),
                 'percent': round(self.percentage(kind), 1)}
                for kind in MatchKind
            ]
        ).set_index('match')


@dataclass
class PaperComparison:
    paper: Paper
    result: MatchResult


def compare_papers(papers: List[Paper], corpus: str, matcher: TitleMatcher,
                   summary: Optional[MatchSummary] = None)\
        -> Tuple[List[PaperComparison], MatchSummary]:
    """
    Classify every paper title against the corpus. Counts are added to
    `summary` when one is passed, so several batches can share it.
    """
    if summary is None:
        summary = MatchSummary()

    comparisons = []
    for paper in papers:
        result = matcher.match(paper.title, corpus)
        summary.add(result)
        comparisons.append(PaperComparison(paper, result))
    return comparisons, summary


def comparisons_to_frame(comparisons: List[PaperComparison]) -> pd.DataFrame:
    columns = ['id', 'title', 'source', 'relevance_score', 'match',
               'ratio', 'keywords', 'matched_keywords']
    records = [
        {
            'id': item.paper.id,
            'title': item.paper.title,
            'source': item.paper.source,
            'relevance_score': item.paper.relevance_score,
            'match': item.result.kind.value,
            'ratio': round(item.result.ratio, 3),
            'keywords': ', '.join(item.result.keywords),
            'matched_keywords': ', '.join(item.result.matched_keywords)
        }
        for item in comparisons
    ]
    return pd.DataFrame(records, columns=columns)


def format_result(result: MatchResult,
                  n_keywords: int = REPORT_KEYWORDS) -> List[str]:
    if result.kind == MatchKind.EXACT:
        return ['   EXACT MATCH found in emails']
    if result.kind == MatchKind.PARTIAL:
        matched = ', '.join(result.matched_keywords[:n_keywords])
        return [f'   PARTIAL MATCH ({result.ratio:.0%}): {matched}']

    lines = [
        f'   NO MATCH - Keywords: {", ".join(result.keywords[:n_keywords])}',
        f'      Matched: {", ".join(result.matched_keywords[:n_keywords])}'
    ]
    if result.context is not None:
        lines.append(
            f'      Context with "{result.context_keyword}": '
            f'{result.context[:CONTEXT_PREVIEW]}...'
        )
    return lines


class TitleComparator:
    def __init__(self, config: Dict[str, Any],
                 logger_config: Dict[str, Any]) -> None:
        self._logger = create_logger(logger_config, config['log_file'])
        self._report_keywords = config.get('report_keywords',
                                           REPORT_KEYWORDS)
        self._matcher = TitleMatcher(
            threshold=config.get('match_threshold', MATCH_THRESHOLD),
            stop_words=config.get('stop_words') or STOP_WORDS,
            min_keyword_length=config.get('min_keyword_length',
                                          MIN_KEYWORD_LENGTH),
            context_before=config.get('context_before', CONTEXT_BEFORE),
            context_after=config.get('context_after', CONTEXT_AFTER)
        )
        self._logger.info('Successfully initialized TitleComparator')

    def build_corpus(self, emails: List[Email]) -> str:
        tqdm_params = {
            'iterable': emails,
            'desc': 'Normalizing emails',
            'bar_format': BAR_FORMAT
        }
        corpus = ' '.join(normalize_text(email.body)
                          for email in tqdm(**tqdm_params))
        self._logger.info(
            f'Built corpus of {len(corpus)} chars from {len(emails)} emails'
        )
        return corpus

    def compare(self, emails: List[Email], papers: List[Paper])\
            -> Tuple[List[PaperComparison], MatchSummary]:
        print(f'Found {len(emails)} emails and {len(papers)}'
              ' extracted papers\n')
        corpus = self.build_corpus(emails)
        comparisons, summary = compare_papers(papers, corpus, self._matcher)

        print('=' * RULE_WIDTH)
        print('TITLE COMPARISON')
        print('=' * RULE_WIDTH + '\n')
        for num, item in enumerate(comparisons):
            print(f'{num + 1}. {item.paper.title}')
            print(f'   Source: {item.paper.source}'
                  f' | Score: {item.paper.relevance_score}')
            for line in format_result(item.result, self._report_keywords):
                print(line)
            print()

            if item.result.kind == MatchKind.NONE:
                self._logger.warning(
                    f'No textual support for title "{item.paper.title}"'
                )

        self.print_summary(summary)
        self._logger.info(
            f'Compared {summary.total} titles: {summary.exact} exact,'
            f' {summary.partial} partial, {summary.none} unmatched'
        )
        return comparisons, summary

    @staticmethod
    def print_summary(summary: MatchSummary) -> None:
        print('=' * RULE_WIDTH)
        print('SUMMARY')
        print('=' * RULE_WIDTH)
        print(f'Total papers: {summary.total}')
        print(f'Exact matches: {summary.exact}'
              f' ({summary.percentage(MatchKind.EXACT):.1f}%)')
        print(f'Partial matches: {summary.partial}'
              f' ({summary.percentage(MatchKind.PARTIAL):.1f}%)')
        print(f'No matches (possible hallucinations): {summary.none}'
              f' ({summary.percentage(MatchKind.NONE):.1f}%)')
        print()

        if summary.none > 0:
            print(f'Warning: {summary.none} papers may be hallucinated'
                  ' or have incorrect titles')
            print('   Review the "NO MATCH" entries above'
                  ' for potential issues\n')

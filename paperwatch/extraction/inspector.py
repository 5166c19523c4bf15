import os
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional
from paperwatch.core.data import Email
from paperwatch.core.normalization import html_to_plain_text
from paperwatch.extraction.articles import ExtractedArticle
from paperwatch.extraction.extractor import (extract_articles_from_email,
                                             batch_articles_by_tokens,
                                             MAX_TOKENS_PER_BATCH,
                                             MAX_ARTICLES_PER_BATCH)
from paperwatch.utils import (create_logger, get_full_path, write_json,
                              safe_filename_part, timestamp_ms, truncate)


RULE_WIDTH = 80
SNAPSHOT_HTML_CHARS = 2000
PREVIEW_CHARS = 400


@dataclass
class InspectionSummary:
    processed: int = 0
    failed: int = 0
    articles: int = 0
    snapshots: int = 0


def build_snapshot(email: Email, articles: List[ExtractedArticle],
                   html_limit: int = SNAPSHOT_HTML_CHARS) -> Dict[str, Any]:
    return {
        'email': {
            'from': email.sender,
            'subject': email.subject,
            'date': email.date,
            'bodyLength': len(email.body)
        },
        'articles': [
            {
                'title': article.title,
                'journal': article.journal,
                'authors': article.authors,
                'abstract': article.abstract,
                'doi': article.doi,
                'estimatedTokens': article.estimated_tokens,
                'htmlContentLength': len(article.html_content),
                'htmlContent': article.html_content[:html_limit]
            }
            for article in articles
        ],
        'extractedAt': datetime.now().isoformat()
    }


def snapshot_filename(sender: str, position: int) -> str:
    return (f'extracted_{safe_filename_part(sender)}_{position}'
            f'_{timestamp_ms()}.json')


class ExtractionInspector:
    """
    Runs article extraction over synced emails without calling any
    model and prints what would be sent for analysis.
    """
    def __init__(self, config: Dict[str, Any],
                 logger_config: Dict[str, Any]) -> None:
        self._logger = create_logger(logger_config, config['log_file'])
        self._snapshot_dir = get_full_path(config['snapshot_dir'])
        self._snapshot_chars = config.get('snapshot_html_chars',
                                          SNAPSHOT_HTML_CHARS)
        self._preview_chars = config.get('preview_chars', PREVIEW_CHARS)
        self._max_tokens = config.get('max_tokens_per_batch',
                                      MAX_TOKENS_PER_BATCH)
        self._max_articles = config.get('max_articles_per_batch',
                                        MAX_ARTICLES_PER_BATCH)
        self._logger.info('Successfully initialized ExtractionInspector')

    def save_snapshot(self, email: Email, articles: List[ExtractedArticle],
                      position: int = 0) -> str:
        os.makedirs(self._snapshot_dir, exist_ok=True)
        path = os.path.join(self._snapshot_dir,
                            snapshot_filename(email.sender, position))
        write_json(build_snapshot(email, articles, self._snapshot_chars),
                   path)
        self._logger.info(f'Saved extraction snapshot to {path}')
        return path

    @staticmethod
    def print_article(num: int, article: ExtractedArticle) -> None:
        print(f'   {num}. {truncate(article.title, 80)}')
        print(f'      Journal: {article.journal}')
        print(f'      Size: {article.estimated_tokens} tokens'
              f' ({len(article.html_content)} chars)')
        if article.authors:
            print(f'      Authors: {truncate(article.authors, 60)}')
        if article.abstract:
            print(f'      Abstract: {truncate(article.abstract, 100)}')
        if article.doi:
            print(f'      DOI: {article.doi}')
        print()

    def print_preview(self, article: ExtractedArticle) -> None:
        print('Sample content for first article:')
        print('-' * RULE_WIDTH)
        sample = html_to_plain_text(article.html_content[:500])
        print(truncate(sample, self._preview_chars))
        print('-' * RULE_WIDTH + '\n')

    def inspect_email(self, position: int, total: int, email: Email,
                      save_snapshot: bool = False) -> List[ExtractedArticle]:
        print('=' * RULE_WIDTH)
        print(f'EMAIL {position + 1}/{total}')
        print('=' * RULE_WIDTH)
        print(f'From:    {email.sender}')
        print(f'Subject: {email.subject}')
        print(f'Date:    {email.date}')
        print(f'Size:    {len(email.body) / 1024:.1f} KB\n')

        print('Extracting articles...')
        start = time.perf_counter()
        articles = extract_articles_from_email(email.body, email.sender,
                                               email.subject)
        elapsed_ms = (time.perf_counter() - start) * 1000
        batches = batch_articles_by_tokens(articles, self._max_tokens,
                                           self._max_articles)
        print(f'Extracted {len(articles)} articles in {elapsed_ms:.0f}ms'
              f' ({len(batches)} analysis batches)\n')

        for num, article in enumerate(articles):
            self.print_article(num + 1, article)

        if save_snapshot and articles:
            path = self.save_snapshot(email, articles, position)
            print(f'Saved extraction details to: {os.path.basename(path)}\n')

        if articles:
            self.print_preview(articles[0])
        return articles

    def inspect(self, emails: List[Email], index: Optional[int] = None,
                save_snapshots: bool = False) -> InspectionSummary:
        """
        Inspect all emails, or only the one at `index`. A failure on one
        email is logged and the run goes on with the next one.
        """
        if index is not None and not 0 <= index < len(emails):
            raise IndexError(
                f'Email index {index} not found'
                f' (only {len(emails)} emails available)'
            )

        positions = [index] if index is not None else range(len(emails))
        summary = InspectionSummary()
        for position in positions:
            email = emails[position]
            summary.processed += 1
            try:
                articles = self.inspect_email(position, len(emails), email,
                                              save_snapshots)
            except Exception as e:
                summary.failed += 1
                print(f'Extraction failed: {e}')
                self._logger.exception(
                    f'Extraction failed for email #{position}'
                    f' from {email.sender}: {e}'
                )
                continue

            summary.articles += len(articles)
            if save_snapshots and articles:
                summary.snapshots += 1

        self.print_summary(summary)
        return summary

    @staticmethod
    def print_summary(summary: InspectionSummary) -> None:
        print('\n' + '=' * RULE_WIDTH)
        print('SUMMARY')
        print('=' * RULE_WIDTH)
        print(f'Total emails processed: {summary.processed}')
        print(f'Failed emails: {summary.failed}')
        print(f'Total articles extracted: {summary.articles}')
        print('\nTip: use --save-chunks to save extraction details'
              ' for inspection')
        print('Tip: use --email 0 to inspect only the first email\n')

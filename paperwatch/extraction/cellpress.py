"""
Cell Press alerts: article titles are the text of links to cell.com,
often wrapped in URL-encoded notification.elsevier.com redirects.
Authors sit in an <i> tag in the table row after the title.
"""
import re
from logging import getLogger
from typing import List, Optional
from urllib.parse import unquote
from bs4 import BeautifulSoup
from bs4.element import Tag
from paperwatch.extraction.articles import (ExtractedArticle, make_article,
                                            deduplicate, clean_text,
                                            inner_html)


logger = getLogger(__name__)

DEFAULT_JOURNAL = 'Cell Press'
# compound names first so 'Cell' does not shadow them
CELL_JOURNALS = [
    'Cell Reports Medicine',
    'Cell Reports Physical Science',
    'Cell Reports Methods',
    'Cell Stem Cell',
    'Cell Reports',
    'Cell Metabolism',
    'Cell Systems',
    'Cell Chemical Biology',
    'Cell Host & Microbe',
    'Developmental Cell',
    'Molecular Cell',
    'Cancer Cell',
    'Cell Genomics',
    'Immunity',
    'Neuron',
    'Structure',
    'iScience',
    'Cell'
]
JOURNAL_BY_SLUG = {
    'cell-stem-cell': 'Cell Stem Cell',
    'cell-reports': 'Cell Reports',
    'cell-metabolism': 'Cell Metabolism',
    'cell-systems': 'Cell Systems',
    'cell-chemical-biology': 'Cell Chemical Biology',
    'cell-host-microbe': 'Cell Host & Microbe',
    'developmental-cell': 'Developmental Cell',
    'molecular-cell': 'Molecular Cell',
    'cancer-cell': 'Cancer Cell',
    'cell-genomics': 'Cell Genomics',
    'cell-reports-medicine': 'Cell Reports Medicine',
    'cell-reports-physical-science': 'Cell Reports Physical Science',
    'cell-reports-methods': 'Cell Reports Methods',
    'immunity': 'Immunity',
    'neuron': 'Neuron',
    'structure': 'Structure',
    'iscience': 'iScience',
    'cell': 'Cell'
}
SKIPPED_LINK_PARTS = [
    'unsubscribe', 'facebook', 'twitter', 'youtube', 'issue?pii',
    '/home', '/pb-assets/', '/archive', 'newarticles'
]
SKIPPED_TITLE_PARTS = ['online now', 'table of contents', 'archive']
MIN_TITLE_LENGTH = 20
MAX_TITLE_LENGTH = 300
PII_PATTERN = re.compile(r'S(\d{4}-\d{4})\((\d{2})\)(\d{5}-?\d?)')
CONTEXT_DOI_PATTERN = re.compile(r'doi[:\s]*([0-9.]+/S[^\s<>"]+)', re.I)
SLUG_PATTERN = re.compile(r'cell\.com/([^/]+)/')


def detect_journal_from_subject(subject: str) -> str:
    subject_lower = subject.lower()
    for journal in CELL_JOURNALS:
        if journal.lower() in subject_lower:
            logger.info(f'Detected Cell Press journal from subject: {journal}')
            return journal
    return DEFAULT_JOURNAL


def detect_journal_from_url(url: str) -> Optional[str]:
    slug_match = SLUG_PATTERN.search(url)
    if slug_match:
        return JOURNAL_BY_SLUG.get(slug_match.group(1))
    return None


def is_article_link(url: str) -> bool:
    if any(part in url for part in SKIPPED_LINK_PARTS):
        return False
    return 'fulltext' in url or '/article/' in url


def collect_doi(url: str, context_html: str) -> Optional[str]:
    pii_match = PII_PATTERN.search(url)
    if pii_match:
        return f'10.1016/j.cell.20{pii_match.group(2)}.{pii_match.group(3)}'
    context_match = CONTEXT_DOI_PATTERN.search(context_html)
    return context_match.group(1) if context_match else None


def looks_like_authors(text: str, min_length: int) -> bool:
    return min_length < len(text) < 500\
        and ('et al' in text or ',' in text)


def collect_authors(link: Tag, container: Optional[Tag]) -> Optional[str]:
    row = link.find_parent('tr')
    if row is not None:
        next_row = row.find_next_sibling()
        if next_row is not None and next_row.name == 'tr':
            italic = next_row.find('i')
            if italic is not None:
                text = italic.get_text().strip()
                if looks_like_authors(text, 5):
                    return text

    authors = None
    if container is not None:
        for italic in container.find_all('i'):
            text = italic.get_text().strip()
            if looks_like_authors(text, 10):
                authors = text
    return authors


def extract_cellpress_articles(html: str,
                               subject: str = '') -> List[ExtractedArticle]:
    soup = BeautifulSoup(html, 'lxml')
    default_journal = detect_journal_from_subject(subject)

    articles = []
    for link in soup.find_all('a'):
        href = link.get('href') or ''
        if 'cell.com' not in href:
            continue

        url = unquote(href)
        if not is_article_link(url):
            continue

        title = clean_text(link.get_text())
        if not MIN_TITLE_LENGTH <= len(title) <= MAX_TITLE_LENGTH:
            continue
        if any(part in title.lower() for part in SKIPPED_TITLE_PARTS):
            continue

        container = link.find_parent(['td', 'div'])
        context_html = inner_html(container)

        journal = default_journal
        if journal == DEFAULT_JOURNAL:
            journal = detect_journal_from_url(url) or DEFAULT_JOURNAL

        articles.append(make_article(
            title,
            context_html,
            authors=collect_authors(link, container),
            doi=collect_doi(url, context_html),
            journal=journal
        ))
    return deduplicate(articles)

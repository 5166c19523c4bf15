"""
bioRxiv and medRxiv alerts come either as HTML with links to the preprint
servers or as plain text (highwire alerts) where every article ends with
a 'doi:' line preceded by its title and authors.
"""
import re
from logging import getLogger
from typing import List, Optional, Tuple
from bs4 import BeautifulSoup
from paperwatch.extraction.articles import (ExtractedArticle, make_article,
                                            deduplicate, inner_html)


logger = getLogger(__name__)

LINK_DOI = re.compile(r'10\.\d+/[\d.]+')
TEXT_DOI = re.compile(r'doi[:\s]+\s*(10\.\d+/[^\s\[\]<>]+)', re.I)
SECTION_HEADER = re.compile(r'^[A-Z][a-z]+(\s+[A-Z][a-z]+)*$')
AUTHOR_START = re.compile(r'^[A-Z][a-z]+ [A-Z][a-z]+,')
KNOWN_HEADERS = {'Bioinformatics', 'Genomics', 'Systems Biology'}
SERVER_MARKERS = ['biorxiv posted', 'medrxiv posted', 'biorxiv ', 'medrxiv ']
LINK_MARKERS = ['[Abstract]', '[PDF]', '[Full Text]']
LOOKBEHIND_CHARS = 600
MIN_TITLE_LENGTH = 20

PLAIN_TEXT_RULES = [
    (re.compile(r'<br\s*/?>', re.I), '\n'),
    (re.compile(r'</p>', re.I), '\n\n'),
    (re.compile(r'</div>', re.I), '\n'),
    (re.compile(r'<[^>]+>'), ''),
    (re.compile('&nbsp;'), ' '),
    (re.compile('&amp;'), '&')
]


def html_to_lines_text(html: str) -> str:
    """Strip tags while keeping line structure for plain text parsing."""
    text = html
    for pattern, replacement in PLAIN_TEXT_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


def is_skipped_line(line: str) -> bool:
    line_lower = line.lower()
    if any(marker in line_lower for marker in SERVER_MARKERS):
        return True
    if any(marker in line for marker in LINK_MARKERS):
        return True
    return line in KNOWN_HEADERS\
        or (SECTION_HEADER.match(line) is not None and len(line) < 30)


def is_author_line(line: str) -> bool:
    n_commas = line.count(',')
    return (' and ' in line and n_commas >= 1)\
        or n_commas >= 3\
        or AUTHOR_START.match(line) is not None


def find_title_and_authors(text_before_doi: str)\
        -> Tuple[Optional[str], Optional[str]]:
    """Walk backwards from a DOI to its authors and title lines."""
    lines = [line for line in re.split(r'[\r\n]+', text_before_doi)
             if line.strip()]
    title, authors = None, None
    for line in reversed(lines):
        line = line.strip()
        if is_skipped_line(line):
            continue
        if authors is None and is_author_line(line):
            authors = line
            continue
        if 25 < len(line) < 400:
            title = line
            break
    return title, authors


def extract_from_links(html: str) -> List[ExtractedArticle]:
    soup = BeautifulSoup(html, 'lxml')
    articles = []
    server_link = re.compile(r'biorxiv\.org|medrxiv\.org')
    for link in soup.find_all('a', href=server_link):
        href = link['href']
        title = link.get_text().strip()
        if len(title) < MIN_TITLE_LENGTH or 'unsubscribe' in title.lower():
            continue

        doi_match = LINK_DOI.search(href)
        container = link.find_parent(['tr', 'div'])
        context_html = inner_html(container) or inner_html(link.parent)
        articles.append(make_article(
            title,
            context_html,
            doi=doi_match.group(0) if doi_match else None,
            journal='medRxiv' if 'medrxiv' in href else 'bioRxiv'
        ))
    return articles


def extract_from_plain_text(html: str) -> List[ExtractedArticle]:
    plain_text = html_to_lines_text(html)
    doi_matches = list(TEXT_DOI.finditer(plain_text))
    if not doi_matches:
        logger.warning(
            f'No DOIs found in plain text ({len(plain_text)} chars)'
        )
        return []

    logger.info(f'Found {len(doi_matches)} DOIs in plain text format')
    journal = 'medRxiv' if 'medrxiv' in plain_text.lower() else 'bioRxiv'
    articles = []
    for doi_match in doi_matches:
        start = max(0, doi_match.start() - LOOKBEHIND_CHARS)
        title, authors = find_title_and_authors(
            plain_text[start:doi_match.start()]
        )
        if not title:
            continue

        doi = doi_match.group(1)
        logger.info(f'Extracted "{title[:50]}..." from {journal}')
        articles.append(make_article(
            title,
            f'{title}\n{authors or ""}\ndoi:{doi}',
            token_source=title + (authors or ''),
            authors=authors,
            doi=doi,
            journal=journal
        ))
    return articles


def extract_biorxiv_articles(html: str) -> List[ExtractedArticle]:
    articles = extract_from_links(html)
    if not articles:
        articles = extract_from_plain_text(html)

    articles = deduplicate(articles, key=lambda t: t.lower()[:60])
    logger.info(f'Total extracted: {len(articles)} bioRxiv articles')
    return articles

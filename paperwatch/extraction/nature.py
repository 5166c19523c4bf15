"""
Nature Portfolio alerts. Only the research part of an email is parsed:
the 'News & Views', 'Reviews' and 'Articles' sections, each running from
its h2/h3 heading to the next one. Titles are links inside 18px spans,
abstracts use 16px spans and authors bold 14px spans.
"""
import re
from logging import getLogger
from typing import List, Optional
from bs4 import BeautifulSoup
from bs4.element import Tag
from paperwatch.extraction.articles import (ExtractedArticle, make_article,
                                            deduplicate, clean_text,
                                            has_style, inner_html)


logger = getLogger(__name__)

DEFAULT_JOURNAL = 'Nature'
NATURE_JOURNALS = [
    'Nature Medicine', 'Nature Aging', 'Nature Communications',
    'Nature Genetics', 'Nature Methods', 'Nature Neuroscience',
    'Nature Cell Biology', 'Nature Immunology', 'Nature Biotechnology',
    'Nature Chemical Biology', 'Nature Structural & Molecular Biology',
    'Nature Reviews', 'Nature Climate Change', 'Nature Energy',
    'Nature Materials', 'Nature Nanotechnology', 'Nature Physics',
    'Nature Photonics', 'Nature Plants', 'Nature Protocols',
    'Communications Biology'
]
RESEARCH_SECTIONS = ['news & views', 'reviews', 'articles']
HEADINGS = ['h2', 'h3']
SUBJECT_JOURNAL = re.compile(r'^(Nature\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)?)')
NATURE_HOSTS = ['springernature.com', 'nature.com']
FOOTER_MARKERS = ['unsubscribe', '©', 'preferences', 'Sign up']


def detect_nature_journal(subject: str) -> str:
    subject_lower = subject.lower()
    for journal in NATURE_JOURNALS:
        if journal.lower() in subject_lower:
            return journal

    subject_match = SUBJECT_JOURNAL.match(subject or '')
    if subject_match:
        return subject_match.group(1)
    return DEFAULT_JOURNAL


def is_research_heading(heading: Optional[Tag]) -> bool:
    if heading is None:
        return False
    text = clean_text(heading.get_text()).lower()
    return any(text.startswith(name) for name in RESEARCH_SECTIONS)


def find_research_headings(soup: BeautifulSoup) -> List[Tag]:
    headings = [heading for heading in soup.find_all(HEADINGS)
                if is_research_heading(heading)]
    for heading in headings:
        logger.info(f'Found "{clean_text(heading.get_text())}" section')
    if not headings:
        logger.warning(
            'Could not find research sections in Nature email,'
            ' using full email'
        )
    return headings


def in_research_section(tag: Tag) -> bool:
    return is_research_heading(tag.find_previous(HEADINGS))


def is_nature_link(href: Optional[str]) -> bool:
    return bool(href) and any(host in href for host in NATURE_HOSTS)


def collect_abstract(container: Optional[Tag]) -> Optional[str]:
    abstract = None
    if container is None:
        return abstract
    for span in container.find_all('span'):
        if has_style(span, 'font-size: 16px'):
            text = span.get_text().strip()
            if 50 < len(text) < 1000:
                abstract = text
    return abstract


def collect_authors(container: Optional[Tag]) -> Optional[str]:
    authors = None
    if container is None:
        return authors
    for span in container.find_all('span'):
        if has_style(span, 'font-size: 14px')\
                and has_style(span, 'font-weight: bold'):
            authors = span.get_text().strip()
    return authors


def extract_from_title_spans(soup: BeautifulSoup, journal: str,
                             research_only: bool) -> List[ExtractedArticle]:
    articles = []
    for span in soup.find_all('span'):
        if not has_style(span, 'font-size: 18px'):
            continue
        if research_only and not in_research_section(span):
            continue
        link = span.find('a')
        if link is None:
            continue

        href = link.get('href') or ''
        title = link.get_text().strip()
        if not 20 <= len(title) <= 500 or not is_nature_link(href):
            continue

        container = span.find_parent('td')
        articles.append(make_article(
            title,
            inner_html(container),
            authors=collect_authors(container),
            abstract=collect_abstract(container),
            journal=journal
        ))
    return articles


def extract_from_table_cells(soup: BeautifulSoup,
                             journal: str) -> List[ExtractedArticle]:
    articles = []
    for cell in soup.find_all('td'):
        text = cell.get_text().strip()
        if not 100 <= len(text) <= 2000:
            continue

        link = cell.find('a', href=is_nature_link)
        if link is None:
            continue
        title = link.get_text().strip()
        if len(title) < 20:
            continue
        if any(marker in text for marker in FOOTER_MARKERS):
            continue

        articles.append(make_article(title, inner_html(cell),
                                     journal=journal))
    return articles


def extract_nature_articles(html: str,
                            journal: str = DEFAULT_JOURNAL)\
        -> List[ExtractedArticle]:
    soup = BeautifulSoup(html, 'lxml')
    research_only = bool(find_research_headings(soup))
    articles = extract_from_title_spans(soup, journal, research_only)
    if not articles:
        articles = extract_from_table_cells(soup, journal)
    return deduplicate(articles, key=lambda t: t[:80].lower().strip())

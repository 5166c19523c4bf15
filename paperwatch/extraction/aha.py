"""
AHA Journals alerts (Circulation, Hypertension, Stroke, ...). Titles are
bold links, or bold/title-class spans inside links in newer layouts.
"""
import re
from logging import getLogger
from typing import List, Optional
from bs4 import BeautifulSoup
from bs4.element import Tag
from paperwatch.extraction.articles import (ExtractedArticle, make_article,
                                            deduplicate, clean_text, closest,
                                            classes_of, has_style, style_of,
                                            inner_html)


logger = getLogger(__name__)

DEFAULT_JOURNAL = 'AHA Journals'
# checked in order, more specific names first
JOURNAL_MARKERS = [
    (('circulation research',), 'Circulation Research'),
    (('circulation: heart failure', 'circ heart fail'),
     'Circulation: Heart Failure'),
    (('circulation: genomic', 'circ genom'),
     'Circulation: Genomic and Precision Medicine'),
    (('circulation',), 'Circulation'),
    (('hypertension',), 'Hypertension'),
    (('stroke',), 'Stroke'),
    (('arteriosclerosis', 'atvb'),
     'Arteriosclerosis, Thrombosis, and Vascular Biology'),
    (('jaha', 'journal of the american heart'), 'JAHA'),
    (('circ cardiovasc',), 'Circulation: Cardiovascular')
]
NAVIGATION_TITLES = ['view in browser', 'unsubscribe', 'privacy policy']
DOI_PATTERN = re.compile(r'doi/(?:full/|abs/)?([0-9.]+/[^\s?&]+)', re.I)
AUTHOR_CLASS = re.compile(r'^loa$|author|contrib')
ARTICLE_HOST = re.compile(r'ahajournals\.org|doi\.org')
MIN_TITLE_LENGTH = 15


def detect_aha_journal(subject: str, context: str) -> str:
    text = f'{subject} {context}'.lower()
    for markers, journal in JOURNAL_MARKERS:
        if any(marker in text for marker in markers):
            return journal
    return DEFAULT_JOURNAL


def collect_doi(href: str) -> Optional[str]:
    doi_match = DOI_PATTERN.search(href)
    return doi_match.group(1) if doi_match else None


def is_navigation(title: str) -> bool:
    return any(part in title.lower() for part in NAVIGATION_TITLES)


def is_bold_link(tag: Tag) -> bool:
    return tag.name == 'a' and has_style(
        tag, 'font-weight: bold', 'font-size: 18px'
    )


def is_title_span(tag: Tag) -> bool:
    return tag.name == 'span' and (
        'font-weight' in style_of(tag) or 'title' in classes_of(tag)
    )


def parent_table(tag: Optional[Tag]) -> Optional[Tag]:
    """The table enclosing the table that holds `tag`."""
    table = closest(tag, ['table'])
    if table is None or table.parent is None:
        return None
    return closest(table.parent, ['table'])


def collect_authors(context: Optional[Tag]) -> Optional[str]:
    # AHA nests tables, so look up to two table levels above the title
    candidates = [context, parent_table(context),
                  parent_table(parent_table(context))]
    for candidate in candidates:
        if candidate is None:
            continue
        author_tag = candidate.find(class_=AUTHOR_CLASS)
        if author_tag is not None:
            return clean_text(author_tag.get_text())
    return None


def extract_from_bold_links(soup: BeautifulSoup,
                            subject: str) -> List[ExtractedArticle]:
    articles = []
    for link in soup.find_all(is_bold_link):
        title = clean_text(link.get_text())
        if len(title) < MIN_TITLE_LENGTH or is_navigation(title):
            continue

        context_html = inner_html(closest(link, ['td', 'div', 'tr']))
        articles.append(make_article(
            title,
            context_html,
            doi=collect_doi(link.get('href') or ''),
            journal=detect_aha_journal(subject, context_html)
        ))
    return articles


def extract_from_title_spans(soup: BeautifulSoup,
                             subject: str) -> List[ExtractedArticle]:
    articles = []
    for span in soup.find_all(is_title_span):
        title = clean_text(span.get_text())
        if len(title) < MIN_TITLE_LENGTH or is_navigation(title):
            continue

        link = span.find_parent('a')
        if link is None and span.parent is not None:
            link = span.parent.find('a')
        href = (link.get('href') or '') if link is not None else ''

        context = closest(span, ['td', 'div', 'table', 'tr'])
        context_html = inner_html(context)
        articles.append(make_article(
            title,
            context_html,
            authors=collect_authors(context),
            doi=collect_doi(href),
            journal=detect_aha_journal(subject, context_html)
        ))
    return articles


def extract_from_table_cells(soup: BeautifulSoup,
                             subject: str) -> List[ExtractedArticle]:
    articles = []
    for cell in soup.find_all('td'):
        text = cell.get_text().strip()
        if not 30 <= len(text) <= 500:
            continue

        link = cell.find('a', href=ARTICLE_HOST)
        if link is None:
            continue
        title = link.get_text().strip()
        if len(title) < MIN_TITLE_LENGTH:
            continue

        context_html = inner_html(cell)
        articles.append(make_article(
            title,
            context_html,
            doi=collect_doi(link.get('href') or ''),
            journal=detect_aha_journal(subject, context_html)
        ))
    return articles


def extract_aha_articles(html: str,
                         subject: str = '') -> List[ExtractedArticle]:
    soup = BeautifulSoup(html, 'lxml')
    articles = extract_from_bold_links(soup, subject)\
        + extract_from_title_spans(soup, subject)
    if not articles:
        logger.info('Bold links and title spans found nothing,'
                    ' trying table-based extraction')
        articles = extract_from_table_cells(soup, subject)

    articles = deduplicate(articles, key=lambda t: t.lower()[:50])
    logger.info(f'Total extracted: {len(articles)} AHA articles')
    return articles

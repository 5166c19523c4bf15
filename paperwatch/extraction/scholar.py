"""
Google Scholar alerts: every article is an <h3> with the title link,
followed by sibling <div>s holding the citation line and the snippet.
"""
import re
from typing import List, Tuple
from bs4 import BeautifulSoup
from bs4.element import Tag
from paperwatch.extraction.articles import (ExtractedArticle, make_article,
                                            classes_of, style_of)


DEFAULT_JOURNAL = 'Google Scholar'
MIN_TITLE_LENGTH = 10
MAX_SIBLINGS = 3
CITATION_COLOR = '#006621'
TITLE_CLASS = re.compile('gse_alrt')
DASH_SPLIT = re.compile(r'^(.+?)\s+[-–—]\s+(.+)$')
TRAILING_YEAR = re.compile(r'^(.+?),?\s*(?:19|20)\d{2}$')
TRAILING_YEAR_SEP = re.compile(r'[,\s]+(?:19|20)\d{2}$')
ONLY_PUNCTUATION = re.compile(r'^[\d\s\-.,;:]+$')


def collect_citation_and_snippet(h3: Tag) -> Tuple[str, str]:
    citation, snippet = '', ''
    sibling = h3.find_next_sibling()
    n_seen = 0
    while sibling is not None and sibling.name != 'h3'\
            and n_seen < MAX_SIBLINGS:
        text = sibling.get_text().strip()
        style = style_of(sibling)

        if f'color:{CITATION_COLOR}' in style\
                or f'color: {CITATION_COLOR}' in style:
            citation = text
        elif 'sni' in classes_of(sibling):
            snippet = text
        elif len(text) > 20 and not citation:
            citation = text
        elif len(text) > 20 and citation and not snippet:
            snippet = text

        sibling = sibling.find_next_sibling()
        n_seen += 1
    return citation, snippet


def parse_citation(citation: str) -> Tuple[str, str]:
    """
    Split a citation line 'Authors - Journal, Year' into authors and
    journal. Google Scholar separates words with non-breaking spaces.
    """
    journal, authors = DEFAULT_JOURNAL, ''
    if not citation:
        return authors, journal

    dash_match = DASH_SPLIT.match(citation.replace('\u00a0', ' '))
    if not dash_match:
        return authors, journal

    authors = dash_match.group(1).strip()
    after_dash = dash_match.group(2).strip()
    year_match = TRAILING_YEAR.match(after_dash)
    if year_match:
        journal = year_match.group(1).rstrip(',').strip()
    else:
        journal = TRAILING_YEAR_SEP.sub('', after_dash).strip()

    if len(journal) <= 3 or ONLY_PUNCTUATION.match(journal)\
            or '...' in journal or '…' in journal:
        journal = DEFAULT_JOURNAL
    return authors, journal


def extract_scholar_articles(html: str) -> List[ExtractedArticle]:
    soup = BeautifulSoup(html, 'lxml')
    articles = []
    for h3 in soup.find_all('h3'):
        title_link = h3.find('a', class_=TITLE_CLASS)
        if title_link is None:
            continue

        title = title_link.get_text().strip()
        if len(title) < MIN_TITLE_LENGTH:
            continue

        citation, snippet = collect_citation_and_snippet(h3)
        authors, journal = parse_citation(citation)
        articles.append(make_article(
            title,
            f'<h3>{title}</h3>\n<div>{citation}</div>\n<div>{snippet}</div>',
            token_source=title + citation + snippet,
            authors=authors,
            abstract=snippet,
            journal=journal
        ))
    return articles

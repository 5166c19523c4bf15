"""
Module contains a survey of the HTML layout of an alert email. It is used
to find the markers (headings, link hosts, span font sizes, table cells)
an extraction strategy can rely on.
"""
import re
from dataclasses import dataclass, field
from typing import Dict, List, Tuple
from bs4 import BeautifulSoup
from paperwatch.extraction.articles import clean_text, style_of


DEFAULT_LINK_HOSTS = ('springernature.com', 'nature.com')
FONT_SIZE = re.compile(r'font-size:\s*(\d+)px')
SKIPPED_LINK_TEXT = ['unsubscribe', 'preference']


@dataclass
class EmailStructure:
    sections: List[Tuple[str, str]] = field(default_factory=list)
    article_links: List[Tuple[str, str]] = field(default_factory=list)
    span_samples: Dict[int, List[str]] = field(default_factory=dict)
    n_tables: int = 0
    n_article_cells: int = 0

    @property
    def font_sizes(self) -> List[int]:
        return sorted(self.span_samples, reverse=True)


def analyze_email_structure(html: str,
                            link_hosts: Tuple[str, ...] = DEFAULT_LINK_HOSTS)\
        -> EmailStructure:
    soup = BeautifulSoup(html, 'lxml')
    structure = EmailStructure()

    for heading in soup.find_all(['h2', 'h3']):
        text = clean_text(heading.get_text())
        if 0 < len(text) < 100:
            structure.sections.append((heading.name, text))

    for link in soup.find_all('a'):
        href = link.get('href') or ''
        text = clean_text(link.get_text())
        if not any(host in href for host in link_hosts) or len(text) <= 20:
            continue
        if any(part in text.lower() for part in SKIPPED_LINK_TEXT):
            continue
        structure.article_links.append((text, href[:80]))

    for span in soup.find_all('span'):
        size_match = FONT_SIZE.search(style_of(span))
        if not size_match:
            continue
        samples = structure.span_samples.setdefault(
            int(size_match.group(1)), []
        )
        text = span.get_text().strip()[:100]
        if len(text) > 20:
            samples.append(text)

    structure.n_tables = len(soup.find_all('table'))
    for cell in soup.find_all('td'):
        if not 100 < len(cell.get_text().strip()) < 2000:
            continue
        has_link = cell.find(
            'a', href=lambda h: bool(h) and any(host in h
                                                for host in link_hosts)
        )
        if has_link is not None:
            structure.n_article_cells += 1
    return structure

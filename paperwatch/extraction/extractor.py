"""
Module contains the entry point of article extraction: it detects the
publisher of an alert email from its sender and applies the matching
HTML extraction strategy.
"""
from logging import getLogger
from typing import List
from paperwatch.extraction.articles import ExtractedArticle, make_article
from paperwatch.extraction.aha import extract_aha_articles
from paperwatch.extraction.biorxiv import extract_biorxiv_articles
from paperwatch.extraction.cellpress import extract_cellpress_articles
from paperwatch.extraction.nature import (extract_nature_articles,
                                          detect_nature_journal)
from paperwatch.extraction.scholar import extract_scholar_articles


logger = getLogger(__name__)

MAX_TOKENS_PER_BATCH = 15000
MAX_ARTICLES_PER_BATCH = 30
SCHOLAR_SENDERS = ['scholar', 'google']
CELLPRESS_SENDERS = ['cellpress', 'cell.com', 'elsevier']
NATURE_SENDERS = ['nature']
BIORXIV_SENDERS = ['biorxiv', 'medrxiv', 'highwire']
AHA_SENDERS = ['ahajournals', 'heart.org']


def sent_by(sender: str, markers: List[str]) -> bool:
    return any(marker in sender for marker in markers)


def extract_articles_from_email(body: str, sender: str,
                                subject: str) -> List[ExtractedArticle]:
    """
    Split an alert email into articles.

    Args:
        body (str): HTML (or plain text) body of the email.
        sender (str): 'from' header, used to pick the publisher strategy.
        subject (str): email subject, used to refine the journal name.

    Returns:
        List[ExtractedArticle]: extracted articles. When no strategy finds
        anything the whole email is returned as a single article titled
        with the subject.
    """
    sender_lower = sender.lower()
    logger.info(f'Extracting articles from: {sender[:50]}')

    if sent_by(sender_lower, SCHOLAR_SENDERS):
        articles = extract_scholar_articles(body)
    elif sent_by(sender_lower, CELLPRESS_SENDERS):
        articles = extract_cellpress_articles(body, subject)
    elif sent_by(sender_lower, NATURE_SENDERS):
        journal = detect_nature_journal(subject)
        logger.info(f'Nature journal detected: {journal}')
        articles = extract_nature_articles(body, journal)
    elif sent_by(sender_lower, BIORXIV_SENDERS):
        articles = extract_biorxiv_articles(body)
    elif sent_by(sender_lower, AHA_SENDERS):
        articles = extract_aha_articles(body, subject)
    else:
        logger.warning('Unknown email source, trying every strategy')
        articles = [
            *extract_scholar_articles(body),
            *extract_nature_articles(body),
            *extract_cellpress_articles(body, subject),
            *extract_biorxiv_articles(body),
            *extract_aha_articles(body, subject)
        ]

    logger.info(f'Extracted {len(articles)} articles from {sender[:30]}')
    if not articles:
        logger.warning('No articles found, using entire email')
        articles = [make_article(subject, body, journal='Unknown')]
    return articles


def batch_articles_by_tokens(
    articles: List[ExtractedArticle],
    max_tokens: int = MAX_TOKENS_PER_BATCH,
    max_articles: int = MAX_ARTICLES_PER_BATCH
) -> List[List[ExtractedArticle]]:
    """
    Group articles into batches below both limits. An article larger than
    `max_tokens` gets a batch of its own.
    """
    batches = []
    current, current_tokens = [], 0
    for article in articles:
        limit_reached = (
            current_tokens + article.estimated_tokens > max_tokens
            or len(current) >= max_articles
        )
        if limit_reached and current:
            batches.append(current)
            current, current_tokens = [], 0

        current.append(article)
        current_tokens += article.estimated_tokens

    if current:
        batches.append(current)
    return batches

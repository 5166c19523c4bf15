"""
Print the HTML layout of one synced email: section headings, publisher
links, span font sizes and table cells, followed by the articles the
extractor finds in it.

Usage:
    python scripts/analyze_email.py --sync-file debug/test.json --email 1
"""
import sys
from argparse import ArgumentParser
from paperwatch.utils import (parse_config, get_full_path, create_logger,
                              truncate, CONFIG_FILE)
from paperwatch.core.data import EmailLoader
from paperwatch.extraction.extractor import extract_articles_from_email
from paperwatch.extraction.structure import analyze_email_structure


RULE_WIDTH = 80


def parse_arguments():
    parser = ArgumentParser(description='Analyze the layout of an email.')
    parser.add_argument(
        '-s', '--sync-file', type=str, required=True,
        help='Path to the JSON file with synced emails'
    )
    parser.add_argument(
        '-e', '--email', type=int, default=0,
        help='Index of the email to analyze'
    )
    parser.add_argument(
        '-c', '--config', type=str, default=get_full_path(CONFIG_FILE),
        help='Path to the YAML config file'
    )
    return parser.parse_args()


def print_header(title):
    print(f'\n\n{title}')
    print('-' * RULE_WIDTH)


def main():
    arguments = parse_arguments()
    config = parse_config(arguments.config)
    structure_cfg = config['structure']
    logger = create_logger(config['logger'], structure_cfg['log_file'])

    try:
        emails = EmailLoader(arguments.sync_file).load_data()
    except (OSError, ValueError) as e:
        sys.exit(f'Cannot load emails: {e}')
    if not 0 <= arguments.email < len(emails):
        sys.exit(f'Email index {arguments.email} not found'
                 f' (only {len(emails)} emails available)')

    email = emails[arguments.email]
    logger.info(f'Analyzing email #{arguments.email} from {email.sender}')
    print('=' * RULE_WIDTH)
    print('EMAIL STRUCTURE ANALYSIS')
    print('=' * RULE_WIDTH)
    print(f'From: {email.sender}')
    print(f'Subject: {email.subject}')
    print(f'Date: {email.date}')
    print(f'Body size: {len(email.body) / 1024:.1f} KB')

    structure = analyze_email_structure(
        email.body, tuple(structure_cfg['link_hosts'])
    )
    n_samples = structure_cfg.get('samples_per_size', 3)

    print_header('SECTION STRUCTURE:')
    for tag, text in structure.sections:
        print(f'{tag.upper()}: {text}')
    print(f'\nTotal sections found: {len(structure.sections)}')

    print_header('ARTICLE LINKS:')
    print(f'Found {len(structure.article_links)} potential article links\n')
    for num, (text, _) in enumerate(structure.article_links[:10]):
        print(f'{num + 1}. {truncate(text, 70)}')

    print_header('SPAN STYLING:')
    for size in structure.font_sizes:
        samples = structure.span_samples[size]
        print(f'\n{size}px ({len(samples)} instances):')
        for sample in samples[:n_samples]:
            print(f'  - {truncate(sample, 80)}')

    print_header('TABLE STRUCTURE:')
    print(f'Total tables: {structure.n_tables}')
    print(f'Table cells with article-like content:'
          f' {structure.n_article_cells}')

    articles = extract_articles_from_email(email.body, email.sender,
                                           email.subject)
    print_header('EXTRACTED ARTICLES:')
    for num, article in enumerate(articles):
        print(f'{num + 1}. {article.title}')
        if article.authors:
            print(f'   Authors: {truncate(article.authors, 80)}')
        if article.abstract:
            print(f'   Abstract: {truncate(article.abstract, 150)}')
        print()

    print('\n' + '=' * RULE_WIDTH)
    print('SUMMARY')
    print('=' * RULE_WIDTH)
    print(f'Email sections: {len(structure.sections)}')
    print(f'Article links found: {len(structure.article_links)}')
    print(f'Articles extracted: {len(articles)}')
    print(f'Font sizes used: {", ".join(map(str, structure.font_sizes))}px')
    print('=' * RULE_WIDTH)


if __name__ == '__main__':
    main()

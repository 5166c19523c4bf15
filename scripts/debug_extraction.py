"""
Inspect how articles are extracted from synced emails without calling
any model.

Usage:
    python scripts/debug_extraction.py --sync-file debug/test.json
        [--email 0] [--save-chunks]
"""
import os
import sys
from argparse import ArgumentParser
from paperwatch.utils import parse_config, get_full_path, CONFIG_FILE
from paperwatch.core.data import EmailLoader
from paperwatch.extraction.inspector import ExtractionInspector


def parse_arguments():
    parser = ArgumentParser(
        description='Inspect article extraction from synced emails.'
    )
    parser.add_argument(
        '-s', '--sync-file', type=str, required=True,
        help='Path to the JSON file with synced emails'
    )
    parser.add_argument(
        '-e', '--email', type=int, default=None,
        help='Index of a single email to inspect (default: all)'
    )
    parser.add_argument(
        '--save-chunks', action='store_true',
        help='Save extracted articles of every email as a JSON snapshot'
    )
    parser.add_argument(
        '-c', '--config', type=str, default=get_full_path(CONFIG_FILE),
        help='Path to the YAML config file'
    )
    return parser.parse_args()


def main():
    arguments = parse_arguments()
    config = parse_config(arguments.config)
    sync_path = os.path.abspath(arguments.sync_file)

    print(f'\nLoading emails from: {os.path.basename(sync_path)}')
    try:
        emails = EmailLoader(sync_path).load_data()
    except (OSError, ValueError) as e:
        sys.exit(f'Cannot load emails: {e}')
    print(f'   Found {len(emails)} emails\n')

    inspector = ExtractionInspector(config['extraction'], config['logger'])
    try:
        inspector.inspect(emails, arguments.email, arguments.save_chunks)
    except IndexError as e:
        sys.exit(str(e))


if __name__ == '__main__':
    main()

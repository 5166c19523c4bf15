"""
Compare extracted paper titles with the text of the emails they came
from to spot title mismatches and possible hallucinations.

Usage:
    python scripts/debug_title_comparison.py --sync-file debug/test.json
        --analysis-file debug/analysis.json [--output report.csv]
"""
import os
import sys
from argparse import ArgumentParser
from paperwatch.utils import parse_config, get_full_path, CONFIG_FILE
from paperwatch.core.data import EmailLoader, AnalysisLoader
from paperwatch.core.comparison import TitleComparator, comparisons_to_frame


def parse_arguments():
    parser = ArgumentParser(
        description='Compare extracted titles with source emails.'
    )
    parser.add_argument(
        '-s', '--sync-file', type=str, required=True,
        help='Path to the JSON file with synced emails'
    )
    parser.add_argument(
        '-a', '--analysis-file', type=str, required=True,
        help='Path to the JSON file with analysed papers'
    )
    parser.add_argument(
        '-o', '--output', type=str, default=None,
        help='Optional CSV file for per-paper results'
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
    analysis_path = os.path.abspath(arguments.analysis_file)

    print(f'\nLoading emails from: {os.path.basename(sync_path)}')
    print(f'Loading analysis from: {os.path.basename(analysis_path)}\n')
    try:
        emails = EmailLoader(sync_path).load_data()
        papers = AnalysisLoader(analysis_path).load_data()
    except (OSError, ValueError) as e:
        sys.exit(f'Cannot load input: {e}')

    comparator = TitleComparator(config['comparison'], config['logger'])
    comparisons, summary = comparator.compare(emails, papers)

    if arguments.output:
        comparisons_to_frame(comparisons).to_csv(arguments.output,
                                                 index=False)
        print(f'Per-paper results written to: {arguments.output}')
    print(summary.to_frame().to_string())


if __name__ == '__main__':
    main()

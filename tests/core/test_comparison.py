import pytest
from paperwatch.core import comparison
from paperwatch.core.data import Email, Paper
from paperwatch.core.matcher import (MatchKind, MatchResult, TitleMatcher,
                                     MATCH_THRESHOLD, CONTEXT_BEFORE,
                                     CONTEXT_AFTER)
from paperwatch.core.normalization import build_corpus, MIN_KEYWORD_LENGTH


@pytest.fixture
def logger_config(tmp_path):
    return {
        'dir': str(tmp_path / 'logs'),
        'msg_format': '%(asctime)s %(levelname)s %(message)s',
        'dt_format': '%Y-%m-%d %H:%M:%S',
        'level': 'INFO'
    }


@pytest.fixture
def emails():
    return [
        Email(sender='scholaralerts-noreply@google.com',
              subject='New articles',
              body='<h3>Mitochondrial Dynamics in Aging Neurons</h3>'),
        Email(sender='alerts@nature.com', subject='Nature Aging',
              body='<p>Senescent cells drive inflammation in adipose'
                   ' tissue of aged mice</p>')
    ]


@pytest.fixture
def papers():
    return [
        Paper(title='Mitochondrial Dynamics in Aging Neurons', id='1',
              source='Google Scholar', relevance_score=8),
        Paper(title='Senescent Cells Drive Adipose Tissue Inflammation',
              id='2', source='Nature Aging', relevance_score=7),
        Paper(title='Quantum Gravity on Lattice Models', id='3',
              source='Nature Aging', relevance_score=2)
    ]


def test_compare_papers_counts(emails, papers):
    corpus = build_corpus(email.body for email in emails)
    comparisons, summary = comparison.compare_papers(papers, corpus,
                                                     TitleMatcher())
    kinds = [item.result.kind for item in comparisons]
    assert kinds == [MatchKind.EXACT, MatchKind.PARTIAL, MatchKind.NONE]
    assert (summary.exact, summary.partial, summary.none) == (1, 1, 1)
    assert summary.total == 3


def test_compare_papers_accumulates_into_passed_summary(emails, papers):
    corpus = build_corpus(email.body for email in emails)
    summary = comparison.MatchSummary(exact=2)
    _, returned = comparison.compare_papers(papers[:1], corpus,
                                            TitleMatcher(), summary)
    assert returned is summary
    assert summary.exact == 3


def test_summary_percentages():
    summary = comparison.MatchSummary()
    for kind in [MatchKind.EXACT, MatchKind.EXACT, MatchKind.NONE,
                 MatchKind.PARTIAL]:
        summary.add(MatchResult(kind))
    assert summary.percentage(MatchKind.EXACT) == pytest.approx(50.0)
    assert summary.percentage(MatchKind.PARTIAL) == pytest.approx(25.0)


def test_empty_summary_percentages_are_zero():
    summary = comparison.MatchSummary()
    assert all(summary.percentage(kind) == 0.0 for kind in MatchKind)


def test_summary_to_frame():
    frame = comparison.MatchSummary(exact=1, partial=0, none=3).to_frame()
    assert list(frame.index) == ['exact', 'partial', 'none']
    assert frame.loc['none', 'count'] == 3
    assert frame.loc['exact', 'percent'] == 25.0


def test_comparisons_to_frame(emails, papers):
    corpus = build_corpus(email.body for email in emails)
    comparisons, _ = comparison.compare_papers(papers, corpus,
                                               TitleMatcher())
    frame = comparison.comparisons_to_frame(comparisons)
    assert len(frame) == 3
    assert list(frame['match']) == ['exact', 'partial', 'none']
    assert frame.loc[2, 'matched_keywords'] == ''


def test_format_result_partial_shows_percentage():
    result = MatchResult(MatchKind.PARTIAL, ratio=0.8,
                         keywords=['kinase', 'apilimod'],
                         matched_keywords=['kinase', 'apilimod'])
    lines = comparison.format_result(result)
    assert lines == ['   PARTIAL MATCH (80%): kinase, apilimod']


def test_format_result_none_with_context():
    result = MatchResult(MatchKind.NONE, keywords=['zebrafish'],
                         context='x' * 200)
    lines = comparison.format_result(result)
    assert lines[0] == '   NO MATCH - Keywords: zebrafish'
    assert lines[2] == '      Context with "zebrafish": ' + 'x' * 100 + '...'


def test_title_comparator_report(emails, papers, logger_config, capsys):
    config = {'log_file': 'comparison.log', 'match_threshold': 0.7}
    comparator = comparison.TitleComparator(config, logger_config)
    _, summary = comparator.compare(emails, papers)
    output = capsys.readouterr().out

    assert summary.total == 3
    assert 'EXACT MATCH found in emails' in output
    assert 'NO MATCH - Keywords: quantum, gravity, lattice, models' in output
    assert 'No matches (possible hallucinations): 1 (33.3%)' in output
    assert 'may be hallucinated' in output


def test_title_comparator_without_papers(emails, logger_config, capsys):
    comparator = comparison.TitleComparator({'log_file': 'c.log'},
                                            logger_config)
    _, summary = comparator.compare(emails, [])
    output = capsys.readouterr().out
    assert summary.total == 0
    assert 'Exact matches: 0 (0.0%)' in output
    assert 'may be hallucinated' not in output


def test_title_comparator_defaults(logger_config):
    comparator = comparison.TitleComparator({'log_file': 'c.log'},
                                            logger_config)
    matcher = comparator._matcher
    assert matcher.threshold == MATCH_THRESHOLD
    assert matcher.min_keyword_length == MIN_KEYWORD_LENGTH
    assert (matcher.context_before, matcher.context_after) ==\
        (CONTEXT_BEFORE, CONTEXT_AFTER)

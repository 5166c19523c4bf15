import pytest
from paperwatch.extraction import aha


AHA_EMAIL = '''
<html><body><table><tr><td>
<table>
<tr><td><a href="https://www.ahajournals.org/doi/full/10.1161/CIRCULATIONAHA.124.01234"
   style="font-weight: bold; color:#000">Sodium intake and arterial stiffness
   in older adults</a></td></tr>
<tr><td><a href="https://www.ahajournals.org/doi/10.1161/CIRCULATIONAHA.124.05678">
   <span class="title">Nocturnal blood pressure dipping predicts heart failure</span></a>
   <div class="loa">A. Smith, B. Jones</div></td></tr>
<tr><td><a href="https://www.ahajournals.org/doi/full/10.1161/CIRCULATIONAHA.124.01234"
   style="font-weight:bold">Sodium intake and arterial stiffness in older adults
   (duplicate)</a></td></tr>
<tr><td><a href="https://www.ahajournals.org/action/view" style="font-weight: bold"
   >View in browser for this alert</a></td></tr>
</table>
</td></tr></table></body></html>
'''
TABLE_EMAIL = '''
<table><tr><td>
<a href="https://www.ahajournals.org/doi/abs/10.1161/STROKEAHA.124.045678">Early
mobilisation after ischaemic stroke</a> A randomised trial in 12 centres.
</td></tr></table>
'''


@pytest.fixture
def articles():
    return aha.extract_aha_articles(AHA_EMAIL, 'Circulation eTOC')


def test_extract_aha_titles(articles):
    assert [article.title for article in articles] == [
        'Sodium intake and arterial stiffness in older adults',
        'Nocturnal blood pressure dipping predicts heart failure'
    ]


def test_extract_aha_doi_and_journal(articles):
    assert articles[0].doi == '10.1161/CIRCULATIONAHA.124.01234'
    assert articles[1].doi == '10.1161/CIRCULATIONAHA.124.05678'
    assert all(article.journal == 'Circulation' for article in articles)


def test_extract_aha_authors_from_title_span(articles):
    assert articles[0].authors is None
    assert articles[1].authors == 'A. Smith, B. Jones'


def test_extract_aha_table_fallback():
    articles = aha.extract_aha_articles(TABLE_EMAIL, 'Stroke alert')
    assert len(articles) == 1
    assert articles[0].title.startswith('Early')
    assert articles[0].doi == '10.1161/STROKEAHA.124.045678'
    assert articles[0].journal == 'Stroke'


def test_parent_table():
    soup = aha.BeautifulSoup(AHA_EMAIL, 'lxml')
    span = soup.find('span', class_='title')
    outer = aha.parent_table(span)
    assert outer is not None
    assert outer.find('table') is not None
    assert aha.parent_table(outer) is None


@pytest.mark.parametrize('subject, journal', [
    ('Circulation Research: new issue', 'Circulation Research'),
    ('Circ Heart Fail online first', 'Circulation: Heart Failure'),
    ('Hypertension alert', 'Hypertension'),
    ('ATVB in focus', 'Arteriosclerosis, Thrombosis, and Vascular Biology'),
    ('JAHA weekly', 'JAHA'),
    ('Weekly digest', 'AHA Journals')
])
def test_detect_aha_journal(subject, journal):
    assert aha.detect_aha_journal(subject, '') == journal

import pytest
from paperwatch.extraction import biorxiv


LINKS_EMAIL = '''
<html><body><table>
<tr><td><a href="https://www.biorxiv.org/content/10.1101/2024.01.02.573123v1"
   >Loss of proteostasis in aged neural stem cells</a><br>
   Jane Smith, John Doe</td></tr>
<tr><td><a href="https://connect.medrxiv.org/unsubscribe">Unsubscribe from
   these alerts please</a></td></tr>
<tr><td><a href="https://www.medrxiv.org/content/10.1101/2024.03.05.24303811v2"
   >Blood biomarkers of biological age in a UK cohort</a></td></tr>
<tr><td><a href="https://www.biorxiv.org/x">Short</a></td></tr>
</table></body></html>
'''
PLAIN_TEXT_EMAIL = (
    'New Results<br>'
    'Cellular senescence drives kidney fibrosis in aged mice<br>'
    'Jane Smith, John Doe and Ann Lee<br>'
    'bioRxiv posted 2024<br>'
    'doi:10.1101/2024.02.03.578901 [Abstract] [Full Text]<br>'
    '<br>'
    'Systems Biology<br>'
    'Single-nucleus atlas of the ageing mouse heart<br>'
    'Wang Li, Chen Wu, Zhao Ming, Sun Hui<br>'
    'doi: 10.1101/2024.02.04.578950<br>'
)


def test_extract_from_links():
    articles = biorxiv.extract_biorxiv_articles(LINKS_EMAIL)
    assert [article.title for article in articles] == [
        'Loss of proteostasis in aged neural stem cells',
        'Blood biomarkers of biological age in a UK cohort'
    ]
    assert articles[0].doi == '10.1101/2024.01.02.573123'
    assert articles[0].journal == 'bioRxiv'
    assert articles[1].doi == '10.1101/2024.03.05.24303811'
    assert articles[1].journal == 'medRxiv'


def test_extract_from_plain_text():
    articles = biorxiv.extract_biorxiv_articles(PLAIN_TEXT_EMAIL)
    assert len(articles) == 2

    first, second = articles
    assert first.title == ('Cellular senescence drives kidney fibrosis'
                           ' in aged mice')
    assert first.authors == 'Jane Smith, John Doe and Ann Lee'
    assert first.doi == '10.1101/2024.02.03.578901'
    assert first.journal == 'bioRxiv'
    assert second.title == 'Single-nucleus atlas of the ageing mouse heart'
    assert second.authors == 'Wang Li, Chen Wu, Zhao Ming, Sun Hui'
    assert second.doi == '10.1101/2024.02.04.578950'
    assert second.html_content.endswith('doi:10.1101/2024.02.04.578950')


def test_extract_biorxiv_nothing_found():
    assert biorxiv.extract_biorxiv_articles('<p>No preprints today</p>') == []


def test_html_to_lines_text():
    text = biorxiv.html_to_lines_text('<p>A &amp; B</p><div>C<br/>D</div>')
    assert text.split('\n') == ['A & B', '', 'C', 'D']


@pytest.mark.parametrize('line, expected', [
    ('Jane Smith, John Doe and Ann Lee', True),
    ('A Li, B Wu, C Ming, D Hui', True),
    ('Smith Jane, et al', True),
    ('Cellular senescence drives kidney fibrosis', False)
])
def test_is_author_line(line, expected):
    assert biorxiv.is_author_line(line) is expected


@pytest.mark.parametrize('line, expected', [
    ('bioRxiv posted 2024', True),
    ('doi:10.1101/x [Full Text]', True),
    ('Neuroscience', True),
    ('Cellular senescence drives kidney fibrosis', False)
])
def test_is_skipped_line(line, expected):
    assert biorxiv.is_skipped_line(line) is expected

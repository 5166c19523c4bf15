import os
import logging
import pytest
from paperwatch import utils


def test_json_io(tmp_path):
    obj = {'papers': [{'title': 'Über alles', 'score': 3}]}
    path = str(tmp_path / 'tmp.json')
    utils.write_json(obj, path)
    assert os.path.isfile(path)
    assert utils.read_json(path) == obj


def test_write_json_missing_directory(tmp_path):
    with pytest.raises(OSError):
        utils.write_json({}, str(tmp_path / 'missing' / 'tmp.json'))


def test_read_json_missing_file(tmp_path):
    with pytest.raises(OSError):
        utils.read_json(str(tmp_path / 'missing.json'))


def test_parse_config():
    cfg = utils.parse_config(utils.get_full_path(utils.CONFIG_FILE))
    assert bool(cfg)
    assert cfg['comparison']['match_threshold'] == 0.7
    assert 'on' in cfg['comparison']['stop_words']


def test_parse_config_with_sections():
    sections = ['comparison', 'stop_words']
    cfg = utils.parse_config(utils.get_full_path(utils.CONFIG_FILE),
                             *sections)
    assert len(cfg) == 13


def test_logger_init(tmp_path):
    cfg = {
        'dir': str(tmp_path / 'logs'),
        'msg_format': '%(asctime)s %(levelname)s %(message)s',
        'dt_format': '%Y-%m-%d %H:%M:%S',
        'level': 'INFO'
    }
    logger = utils.create_logger(cfg, 'some_file.log')
    assert isinstance(logger, logging.Logger)
    assert os.path.isdir(cfg['dir'])


def test_get_full_path():
    assert utils.get_full_path('config') == os.path.join(utils.ROOT_PATH,
                                                         'config')
    assert utils.get_full_path('/tmp', 'x.json') == '/tmp/x.json'


def test_safe_filename_part():
    assert utils.safe_filename_part('Nature <alerts@nature.com>') ==\
        'Nature__alerts_nature.com_'


def test_truncate():
    assert utils.truncate('abcdef', 3) == 'abc...'
    assert utils.truncate('abc', 3) == 'abc'
    assert utils.truncate(None, 3) == ''

import os
import re
import json
import yaml
from datetime import datetime
from logging import Logger, basicConfig, getLogger
from typing import Dict, Any, Optional


DIR_PATH = os.path.dirname(__file__)
ROOT_PATH = os.path.abspath(os.path.join(DIR_PATH, '..'))
CONFIG_FILE = os.path.join('config', 'debug_config.yaml')


def get_full_path(dirname_or_filename: str, filename: str = None) -> str:
    if os.path.isabs(dirname_or_filename):
        base = dirname_or_filename
    else:
        path_norm = os.path.normpath(dirname_or_filename)
        base = os.path.join(ROOT_PATH, *path_norm.split(os.sep))
    if not filename:
        return base
    return os.path.join(base, filename)


def write_json(obj: Any, path: str, indent: Optional[int] = 2) -> None:
    dirname = os.path.dirname(path)
    if dirname and not os.path.exists(dirname):
        raise OSError(f'Directory {dirname} does not exist')

    with open(path, 'w', encoding='utf-8') as fp:
        json.dump(obj, fp, indent=indent, ensure_ascii=False)


def read_json(path: str) -> Any:
    if not os.path.isfile(path):
        raise OSError(f'File {path} does not exist')

    with open(path, 'r', encoding='utf-8') as fp:
        return json.load(fp)


def parse_config(path: str, *sections: str) -> Dict[str, Any]:
    with open(path, 'r') as config:
        parsed_config = yaml.safe_load(config)
        if sections:
            for section in sections:
                parsed_config = parsed_config[section]
        return parsed_config


def create_logger(logger_config: Dict[str, Any], log_file: str) -> Logger:
    log_dir = get_full_path(logger_config['dir'])
    os.makedirs(log_dir, exist_ok=True)
    logger_params = {
        'filename': os.path.join(log_dir, log_file),
        'format': logger_config['msg_format'],
        'datefmt': logger_config['dt_format'],
        'level': logger_config['level']
    }
    basicConfig(**logger_params)
    return getLogger('')


def safe_filename_part(text: str, max_length: int = 30) -> str:
    """Make a sender address usable inside a file name."""
    return re.sub(r'[<>@\s]', '_', text)[:max_length]


def timestamp_ms() -> int:
    return int(datetime.now().timestamp() * 1000)


def truncate(text: Optional[str], length: int, suffix: str = '...') -> str:
    if not text:
        return ''
    if len(text) <= length:
        return text
    return text[:length] + suffix

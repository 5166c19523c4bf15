"""
Module contains records and loaders for the JSON files the debugging
scripts work on: synced emails and analysis results.
"""
import os
import json
from abc import ABCMeta, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List
from paperwatch.utils import read_json


@dataclass
class Email:
    sender: str
    subject: str
    body: str
    id: str = ''
    date: str = ''
    snippet: str = ''


@dataclass
class Paper:
    title: str
    id: str = ''
    authors: List[str] = field(default_factory=list)
    source: str = ''
    relevance_score: float = 0.0


def parse_email(record: Dict[str, Any]) -> Email:
    if not isinstance(record['body'], str):
        raise TypeError("'body'")
    return Email(
        sender=record['from'],
        subject=record['subject'],
        body=record['body'],
        id=str(record.get('id', '')),
        date=record.get('date') or '',
        snippet=record.get('snippet') or ''
    )


def parse_paper(record: Dict[str, Any]) -> Paper:
    if not isinstance(record['title'], str):
        raise TypeError("'title'")
    authors = record.get('authors') or []
    if isinstance(authors, str):
        authors = [authors]
    return Paper(
        title=record['title'],
        id=str(record.get('id', '')),
        authors=list(authors),
        source=record.get('source') or '',
        relevance_score=record.get('relevanceScore', 0.0)
    )


class AbstractDataLoader(metaclass=ABCMeta):
    def __init__(self, path: str):
        if not os.path.isfile(path):
            raise ValueError(f'File {path} does not exist')
        self._path = path

    def read(self) -> Any:
        try:
            return read_json(self._path)
        except json.JSONDecodeError as e:
            raise ValueError(f'File {self._path} is not valid JSON: {e}')

    @abstractmethod
    def load_data(self) -> Any:
        pass


class EmailLoader(AbstractDataLoader):
    """
    Loads a sync file: a JSON list of email records with at least
    'from', 'subject' and 'body' fields.
    """
    def load_data(self) -> List[Email]:
        records = self.read()
        if not isinstance(records, list):
            raise ValueError(
                f'File {self._path} must contain a list of emails'
            )

        emails = []
        for idx, record in enumerate(records):
            try:
                emails.append(parse_email(record))
            except (KeyError, TypeError, AttributeError) as e:
                raise ValueError(
                    f'Email #{idx} in {self._path} is malformed: '
                    f'missing or invalid field {e}'
                )
        return emails


class AnalysisLoader(AbstractDataLoader):
    """
    Loads an analysis file: a JSON object with a 'papers' list.
    """
    def load_data(self) -> List[Paper]:
        analysis = self.read()
        if not isinstance(analysis, dict):
            raise ValueError(
                f'File {self._path} must contain a JSON object'
            )

        records = analysis.get('papers') or []
        if not isinstance(records, list):
            raise ValueError(f'"papers" in {self._path} must be a list')

        papers = []
        for idx, record in enumerate(records):
            try:
                papers.append(parse_paper(record))
            except (KeyError, TypeError, AttributeError) as e:
                raise ValueError(
                    f'Paper #{idx} in {self._path} is malformed: '
                    f'missing or invalid field {e}'
                )
        return papers

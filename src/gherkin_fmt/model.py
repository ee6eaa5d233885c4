from __future__ import annotations

from typing import List, Optional, Union
from dataclasses import dataclass, field

from gherkin_fmt.constants import DEFAULT_LANGUAGE


@dataclass(frozen=True)
class DocString:
    content: str
    media_type: Optional[str] = field(default=None)


@dataclass(frozen=True)
class DataTable:
    rows: List[List[str]]


Argument = Union[DocString, DataTable, None]


@dataclass(frozen=True)
class Step:
    keyword: str
    text: str
    argument: Argument = field(default=None)


@dataclass(frozen=True)
class Examples:
    header: Optional[List[str]]
    body: List[List[str]] = field(default_factory=list)

    @property
    def table(self) -> DataTable:
        rows = list(self.body)
        if self.header is not None:
            rows.insert(0, self.header)

        return DataTable(rows=rows)


@dataclass(frozen=True)
class Background:
    name: str
    steps: List[Step] = field(default_factory=list)


@dataclass(frozen=True)
class Scenario:
    name: str
    steps: List[Step] = field(default_factory=list)


@dataclass(frozen=True)
class ScenarioOutline:
    name: str
    steps: List[Step] = field(default_factory=list)
    examples: List[Examples] = field(default_factory=list)


Child = Union[Background, Scenario, ScenarioOutline]


@dataclass(frozen=True)
class Feature:
    name: str
    description: str = field(default='')
    children: List[Child] = field(default_factory=list)
    language: str = field(default=DEFAULT_LANGUAGE)


@dataclass(frozen=True)
class Document:
    feature: Optional[Feature] = field(default=None)

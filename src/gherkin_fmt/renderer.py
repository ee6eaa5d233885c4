from __future__ import annotations

import re
import json
import math

from typing import Any, List
from dataclasses import dataclass, field

from gherkin.dialect import Dialect

from gherkin_fmt.constants import ALIGN_RIGHT, ALIGNMENTS, DEFAULT_ALIGN, DEFAULT_INDENT, DEFAULT_LANGUAGE, DOC_STRING_DELIMITER
from gherkin_fmt.errors import EmptyDocument, UnsupportedArgument, UnsupportedNode
from gherkin_fmt.model import (
    Background,
    Child,
    DataTable,
    DocString,
    Document,
    Scenario,
    ScenarioOutline,
    Step,
)


@dataclass(frozen=True)
class Options:
    indent: int = field(default=DEFAULT_INDENT)
    align: str = field(default=DEFAULT_ALIGN)
    dry: bool = field(default=False)

    def __post_init__(self) -> None:
        if self.indent < 0:
            raise ValueError(f'indent must be a non-negative integer, got {self.indent}')

        if self.align not in ALIGNMENTS:
            raise ValueError(f'align must be one of {"|".join(ALIGNMENTS)}, got "{self.align}"')


LONE_SURROGATE = re.compile('[\ud800-\udfff]')


def _reject_constant(value: str) -> Any:
    raise ValueError(f'{value} is not valid JSON')


def _parse_float(value: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f'{value} is out of range')

    return number


def sanitize(value: str) -> str:
    return value.replace('|', '\\|')


def format_json(content: str, indent: int) -> str:
    """Re-serialize `content` as JSON with sorted keys.

    Raises `ValueError` if `content` is not strict JSON (no `NaN`, `Infinity` or numbers that do not fit
    a double) and `RecursionError` if it is nested deeper than the interpreter can handle. Lone
    surrogates in strings are replaced with U+FFFD, so the result can always be encoded.
    """
    value = json.loads(content, parse_constant=_reject_constant, parse_float=_parse_float)

    if indent > 0:
        formatted = json.dumps(value, indent=indent, ensure_ascii=False, sort_keys=True, allow_nan=False)
    else:
        formatted = json.dumps(value, separators=(',', ':'), ensure_ascii=False, sort_keys=True, allow_nan=False)

    return LONE_SURROGATE.sub('\ufffd', formatted.strip())


@dataclass(frozen=True)
class Keywords:
    feature: str
    background: str
    scenario: str
    scenario_outline: str
    examples: str

    @classmethod
    def for_language(cls, language: str) -> Keywords:
        dialect = Dialect.for_name(language) if language != DEFAULT_LANGUAGE else None
        if dialect is None:
            return ENGLISH

        return cls(
            feature=dialect.feature_keywords[0].strip(),
            background=dialect.background_keywords[0].strip(),
            scenario=dialect.scenario_keywords[0].strip(),
            scenario_outline=dialect.scenario_outline_keywords[0].strip(),
            examples=dialect.examples_keywords[0].strip(),
        )


ENGLISH = Keywords(
    feature='Feature',
    background='Background',
    scenario='Scenario',
    scenario_outline='Scenario Outline',
    examples='Examples',
)


class Renderer:
    """Renders a parsed document into canonical gherkin.

    The output buffer lives for one call to `render`, a renderer instance
    can be reused for any number of documents.
    """

    options: Options
    keywords: Keywords

    _buffer: List[str]

    def __init__(self, options: Options) -> None:
        self.options = options
        self.keywords = ENGLISH
        self._buffer = []

    def write(self, level: int, text: str) -> None:
        prefix = ' ' * (level * self.options.indent)

        for line in text.split('\n'):
            self._buffer.append(f'{prefix}{line}\n')

    def render(self, document: Document) -> str:
        self._buffer = []

        feature = document.feature
        if feature is None:
            raise EmptyDocument()

        self.keywords = Keywords.for_language(feature.language)
        if feature.language != DEFAULT_LANGUAGE:
            self.write(0, f'# language: {feature.language}')

        self.write(0, f'{self.keywords.feature}: {feature.name}')
        self.write(0, feature.description)
        self.write(0, '')

        for child in feature.children:
            self.render_child(child)

        result = ''.join(self._buffer).strip()
        self._buffer = []

        return result

    def render_child(self, child: Child) -> None:
        keywords = self.keywords

        if isinstance(child, ScenarioOutline):
            self.write(1, f'{keywords.scenario_outline}: {child.name.strip()}')
        elif isinstance(child, Scenario):
            self.write(1, f'{keywords.scenario}: {child.name.strip()}')
        elif isinstance(child, Background):
            name = child.name.strip()
            self.write(1, f'{keywords.background}: {name}' if len(name) > 0 else f'{keywords.background}:')
        else:
            raise UnsupportedNode(f'unhandled feature children: {child.__class__.__name__}')

        for step in child.steps:
            self.render_step(step)

        if isinstance(child, ScenarioOutline):
            for examples in child.examples:
                self.write(0, '')
                self.write(2, f'{keywords.examples}:')
                self.render_table(examples.table)

        self.write(0, '')

    def render_step(self, step: Step) -> None:
        self.write(2, f'{step.keyword} {step.text}'.replace('  ', ' '))

        argument = step.argument
        if argument is None:
            return

        if isinstance(argument, DocString):
            self.render_doc_string(argument)
        elif isinstance(argument, DataTable):
            self.render_table(argument)
        else:
            raise UnsupportedArgument(f'unsupported step argument: {argument.__class__.__name__}')

    def render_doc_string(self, doc_string: DocString) -> None:
        self.write(2, DOC_STRING_DELIMITER)

        try:
            content = format_json(doc_string.content, self.options.indent)
        except (ValueError, RecursionError):
            content = doc_string.content.replace(DOC_STRING_DELIMITER, '\\"\\"\\"')
            self.write(0, content)
        else:
            self.write(2, content)

        self.write(2, DOC_STRING_DELIMITER)

    def render_table(self, table: DataTable) -> None:
        if len(table.rows) < 1:
            return

        widths = [0] * len(table.rows[0])
        for row in table.rows:
            for index, cell in enumerate(row[: len(widths)]):
                widths[index] = max(widths[index], len(sanitize(cell)))

        column_format = ' %{width}s |' if self.options.align == ALIGN_RIGHT else ' %-{width}s |'
        row_format = '|' + ''.join([column_format.format(width=width) for width in widths])

        for row in table.rows:
            cells = [sanitize(cell) for cell in row[: len(widths)]]
            cells.extend([''] * (len(widths) - len(cells)))
            self.write(3, row_format % tuple(cells))


def render(document: Document, options: Options) -> str:
    return Renderer(options).render(document)

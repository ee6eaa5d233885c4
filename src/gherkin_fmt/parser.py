from __future__ import annotations

import logging

from typing import Any, Dict, List, Optional

from gherkin.parser import Parser
from gherkin.token_scanner import TokenScanner
from gherkin.errors import CompositeParserException, ParserError
from gherkin.dialect import Dialect

from gherkin_fmt.constants import DEFAULT_LANGUAGE
from gherkin_fmt.errors import ParseError, UnsupportedNode
from gherkin_fmt.model import (
    Argument,
    Background,
    Child,
    DataTable,
    DocString,
    Document,
    Examples,
    Feature,
    Scenario,
    ScenarioOutline,
    Step,
)


logger = logging.getLogger(__name__)

Node = Dict[str, Any]


def _cells(row: Optional[Node]) -> Optional[List[str]]:
    if row is None:
        return None

    return [cell.get('value', '') for cell in row.get('cells', [])]


def _to_argument(step: Node) -> Argument:
    if 'docString' in step:
        doc_string = step['docString']
        return DocString(content=doc_string.get('content', ''), media_type=doc_string.get('mediaType', None))

    if 'dataTable' in step:
        return DataTable(rows=[_cells(row) or [] for row in step['dataTable'].get('rows', [])])

    return None


def _to_steps(node: Node) -> List[Step]:
    return [
        Step(
            keyword=step.get('keyword', ''),
            text=step.get('text', ''),
            argument=_to_argument(step),
        )
        for step in node.get('steps', [])
    ]


def _to_examples(node: Node) -> List[Examples]:
    return [
        Examples(
            header=_cells(examples.get('tableHeader', None)),
            body=[_cells(row) or [] for row in examples.get('tableBody', [])],
        )
        for examples in node.get('examples', [])
    ]


def _is_outline(node: Node, outline_keywords: List[str]) -> bool:
    return len(node.get('examples', [])) > 0 or node.get('keyword', '').strip() in outline_keywords


def _to_child(node: Node, outline_keywords: List[str]) -> Child:
    if 'background' in node:
        background = node['background']
        return Background(name=background.get('name', ''), steps=_to_steps(background))

    if 'scenario' in node:
        scenario = node['scenario']
        if _is_outline(scenario, outline_keywords):
            return ScenarioOutline(
                name=scenario.get('name', ''),
                steps=_to_steps(scenario),
                examples=_to_examples(scenario),
            )

        return Scenario(name=scenario.get('name', ''), steps=_to_steps(scenario))

    kinds = ', '.join(sorted(node.keys())) or 'empty'
    raise UnsupportedNode(f'unhandled feature children: {kinds}')


def _outline_keywords(language: str) -> List[str]:
    dialect = Dialect.for_name(language)
    if dialect is None:
        return []

    return [keyword.strip() for keyword in dialect.scenario_outline_keywords]


def _error_message(error: ParserError) -> str:
    errors = error.errors if isinstance(error, CompositeParserException) else [error]

    return '; '.join([' '.join(str(e).split()) for e in errors])


def parse_document(source: str) -> Document:
    try:
        gherkin_document = Parser().parse(TokenScanner(source))
    except ParserError as e:
        raise ParseError(_error_message(e)) from e

    node: Optional[Node] = gherkin_document.get('feature', None)
    if node is None:
        return Document(feature=None)

    language = node.get('language', None) or DEFAULT_LANGUAGE
    outline_keywords = _outline_keywords(language)

    feature = Feature(
        name=node.get('name', ''),
        description=node.get('description', None) or '',
        children=[_to_child(child, outline_keywords) for child in node.get('children', [])],
        language=language,
    )

    logger.debug(f'parsed feature "{feature.name}" with {len(feature.children)} children ({language})')

    return Document(feature=feature)

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from pygls.workspace import TextDocument
from lsprotocol import types as lsp

from gherkin_fmt.errors import FormatError
from gherkin_fmt.parser import parse_document
from gherkin_fmt.renderer import Options, render


if TYPE_CHECKING:  # pragma: no cover
    from gherkin_fmt.server import GherkinFormatLanguageServer


def get_document_range(source: str) -> lsp.Range:
    lines = source.split('\n')
    # positions are counted in utf-16 code units
    last_line_length = len(lines[-1].encode('utf-16-le')) // 2

    return lsp.Range(
        start=lsp.Position(line=0, character=0),
        end=lsp.Position(line=len(lines) - 1, character=last_line_length),
    )


def format_text_document(
    ls: GherkinFormatLanguageServer,
    text_document: TextDocument,
    options: Options,
) -> Optional[List[lsp.TextEdit]]:
    source = text_document.source

    try:
        content = render(parse_document(source), options)
    except FormatError as e:
        ls.logger.debug(f'not formatting {text_document.uri}: {e}')
        return None

    if content == source:
        return None

    return [lsp.TextEdit(range=get_document_range(source), new_text=content)]

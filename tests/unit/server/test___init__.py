from pytest_mock import MockerFixture

from lsprotocol import types as lsp
from pygls.workspace import TextDocument

from gherkin_fmt import __version__
from gherkin_fmt.renderer import Options
from gherkin_fmt.server import (
    GherkinFormatLanguageServer,
    initialize,
    server,
    text_document_formatting,
    workspace_did_change_configuration,
)
from gherkin_fmt.server.features.formatting import format_text_document, get_document_range
from gherkin_fmt.utils import ClientLogger


SOURCE = '''Feature: test
Scenario: test
Given a table
| a | bb |
| ccc | d |
'''

FORMATTED = '''Feature: test


  Scenario: test
    Given a table
      | a   | bb |
      | ccc | d  |'''

FORMATTED_INDENT_4 = '''Feature: test


    Scenario: test
        Given a table
            | a   | bb |
            | ccc | d  |'''


def _formatting_params(tab_size: int = 2) -> lsp.DocumentFormattingParams:
    return lsp.DocumentFormattingParams(
        text_document=lsp.TextDocumentIdentifier(uri='file://test.feature'),
        options=lsp.FormattingOptions(tab_size=tab_size, insert_spaces=True),
    )


class TestGherkinFormatLanguageServer:
    def test___init__(self) -> None:
        ls = GherkinFormatLanguageServer()

        assert ls.name == 'gherkin-fmt'
        assert ls.version == __version__
        assert ls.client_settings == {}
        assert isinstance(ls.logger, ClientLogger)
        assert ls.logger.logger.name == 'GherkinFormatLanguageServer'

    def test_get_options(self) -> None:
        ls = GherkinFormatLanguageServer()

        assert ls.get_options(lsp.FormattingOptions(tab_size=4, insert_spaces=True)) == Options(indent=4, align='left')

        ls.client_settings = {'align': 'right'}
        assert ls.get_options(lsp.FormattingOptions(tab_size=2, insert_spaces=False)) == Options(indent=2, align='right')


def test_initialize() -> None:
    try:
        initialize(server, lsp.InitializeParams(capabilities=lsp.ClientCapabilities()))
        assert server.client_settings == {}

        initialize(
            server,
            lsp.InitializeParams(capabilities=lsp.ClientCapabilities(), initialization_options={'align': 'right'}),
        )
        assert server.client_settings == {'align': 'right'}
    finally:
        server.client_settings = {}


def test_workspace_did_change_configuration() -> None:
    try:
        workspace_did_change_configuration(server, lsp.DidChangeConfigurationParams(settings={'gherkin-fmt': {'align': 'right'}}))
        assert server.client_settings == {'align': 'right'}

        workspace_did_change_configuration(server, lsp.DidChangeConfigurationParams(settings={'align': 'left'}))
        assert server.client_settings == {'align': 'left'}

        workspace_did_change_configuration(server, lsp.DidChangeConfigurationParams(settings=None))
        assert server.client_settings == {'align': 'left'}
    finally:
        server.client_settings = {}


def test_get_document_range() -> None:
    assert get_document_range('') == lsp.Range(start=lsp.Position(line=0, character=0), end=lsp.Position(line=0, character=0))
    assert get_document_range('a\nbc') == lsp.Range(start=lsp.Position(line=0, character=0), end=lsp.Position(line=1, character=2))
    assert get_document_range('a\nbc\n') == lsp.Range(start=lsp.Position(line=0, character=0), end=lsp.Position(line=2, character=0))

    # utf-16 code units, not code points
    assert get_document_range('a\nb\U0001f600') == lsp.Range(start=lsp.Position(line=0, character=0), end=lsp.Position(line=1, character=3))
    assert get_document_range('\U0001f600\nåä') == lsp.Range(start=lsp.Position(line=0, character=0), end=lsp.Position(line=1, character=2))


def test_format_text_document(mocker: MockerFixture) -> None:
    logger_debug_mock = mocker.patch.object(server.logger, 'debug')

    text_document = TextDocument('file://test.feature', SOURCE)

    edits = format_text_document(server, text_document, Options())

    assert edits == [
        lsp.TextEdit(
            range=lsp.Range(start=lsp.Position(line=0, character=0), end=lsp.Position(line=5, character=0)),
            new_text=FORMATTED,
        )
    ]

    # already formatted
    text_document = TextDocument('file://test.feature', FORMATTED)
    assert format_text_document(server, text_document, Options()) is None

    # not gherkin
    text_document = TextDocument('file://test.feature', 'this is not gherkin')
    assert format_text_document(server, text_document, Options()) is None
    logger_debug_mock.assert_called_once()
    args, _ = logger_debug_mock.call_args_list[-1]
    assert args[0].startswith('not formatting file://test.feature: (1:1): expected: ')

    # no feature
    logger_debug_mock.reset_mock()
    text_document = TextDocument('file://test.feature', '# language: en\n')
    assert format_text_document(server, text_document, Options()) is None
    logger_debug_mock.assert_called_once_with('not formatting file://test.feature: empty feature body')


def test_text_document_formatting(mocker: MockerFixture) -> None:
    workspace_mock = mocker.MagicMock()
    workspace_mock.get_text_document.return_value = TextDocument('file://test.feature', SOURCE)
    mocker.patch.object(GherkinFormatLanguageServer, 'workspace', new_callable=mocker.PropertyMock, return_value=workspace_mock)
    logger_exception_mock = mocker.patch.object(server.logger, 'exception')

    edits = text_document_formatting(server, _formatting_params(tab_size=4))

    workspace_mock.get_text_document.assert_called_once_with('file://test.feature')
    assert edits is not None
    assert len(edits) == 1
    assert edits[0].new_text == FORMATTED_INDENT_4
    logger_exception_mock.assert_not_called()

    # invalid alignment in settings
    try:
        server.client_settings = {'align': 'center'}
        assert text_document_formatting(server, _formatting_params()) is None
        logger_exception_mock.assert_called_once_with('failed to format file://test.feature', notify=True)
    finally:
        server.client_settings = {}

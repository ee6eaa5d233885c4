from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, cast

from pygls.server import LanguageServer
from lsprotocol import types as lsp

from gherkin_fmt import __version__
from gherkin_fmt.constants import DEFAULT_ALIGN
from gherkin_fmt.renderer import Options
from gherkin_fmt.utils import ClientLogger

from .features.formatting import format_text_document


class GherkinFormatLanguageServer(LanguageServer):
    logger: ClientLogger
    client_settings: Dict[str, Any]

    def __init__(self, *args: Tuple[Any, ...], **kwargs: Dict[str, Any]) -> None:
        super().__init__(name='gherkin-fmt', version=__version__, *args, **kwargs)  # type: ignore

        self.logger = ClientLogger(self)
        self.client_settings = {}

    def get_options(self, formatting_options: lsp.FormattingOptions) -> Options:
        return Options(
            indent=formatting_options.tab_size,
            align=self.client_settings.get('align', DEFAULT_ALIGN),
        )


server = GherkinFormatLanguageServer()


@server.feature(lsp.INITIALIZE)
def initialize(ls: GherkinFormatLanguageServer, params: lsp.InitializeParams) -> None:
    ls.logger.info(f'initializing language server {__version__}')

    client_settings = params.initialization_options
    if client_settings is not None:
        ls.client_settings = cast(Dict[str, Any], client_settings)

    ls.logger.debug(f'{ls.client_settings=}')


@server.feature(lsp.WORKSPACE_DID_CHANGE_CONFIGURATION)
def workspace_did_change_configuration(
    ls: GherkinFormatLanguageServer,
    params: lsp.DidChangeConfigurationParams,
) -> None:
    settings = params.settings
    if not isinstance(settings, dict):
        return

    settings = settings.get('gherkin-fmt', settings)
    if isinstance(settings, dict):
        ls.client_settings.update(settings)

    ls.logger.debug(f'{lsp.WORKSPACE_DID_CHANGE_CONFIGURATION}: {ls.client_settings=}')


@server.feature(lsp.TEXT_DOCUMENT_FORMATTING)
def text_document_formatting(
    ls: GherkinFormatLanguageServer,
    params: lsp.DocumentFormattingParams,
) -> Optional[List[lsp.TextEdit]]:
    try:
        text_document = ls.workspace.get_text_document(params.text_document.uri)

        return format_text_document(ls, text_document, ls.get_options(params.options))
    except Exception:
        ls.logger.exception(f'failed to format {params.text_document.uri}', notify=True)
        return None

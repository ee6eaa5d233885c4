import os
import sys
import logging
import traceback

from typing import Dict, Optional

from pygls.server import LanguageServer
from lsprotocol import types as lsp


MESSAGE_TYPES: Dict[int, lsp.MessageType] = {
    logging.DEBUG: lsp.MessageType.Debug,
    logging.INFO: lsp.MessageType.Info,
    logging.WARNING: lsp.MessageType.Warning,
    logging.ERROR: lsp.MessageType.Error,
}


class ClientLogger:
    """Logs through `logging`, or to the client log when the server runs embedded in an editor extension
    (`GHERKIN_FMT_RUN_EMBEDDED=true`). With `notify=True` the message is also shown to the user.
    """

    ls: LanguageServer
    logger: logging.Logger
    embedded: bool

    def __init__(self, ls: LanguageServer) -> None:
        self.ls = ls
        self.logger = logging.getLogger(ls.__class__.__name__)
        self.embedded = os.environ.get('GHERKIN_FMT_RUN_EMBEDDED', 'false') == 'true'

    @staticmethod
    def message_type(level: int) -> lsp.MessageType:
        return MESSAGE_TYPES.get(level, lsp.MessageType.Log)

    @staticmethod
    def current_stack_trace() -> Optional[str]:
        _, _, trace = sys.exc_info()

        if trace is None:
            return None

        return f'Stack trace:\n{"".join(traceback.format_tb(trace))}'

    def log(self, level: int, message: str, *, exc_info: bool = False, notify: bool = False) -> None:
        msg_type = self.message_type(level)

        if self.embedded:
            text = message
            if exc_info:
                text = f'{message}\n{self.current_stack_trace()}'
            self.ls.show_message_log(text, msg_type=msg_type)  # type: ignore
        else:
            self.logger.log(level, message, exc_info=exc_info)

        if notify:
            self.ls.show_message(message, msg_type=msg_type)  # type: ignore

    def debug(self, message: str, *, notify: bool = False) -> None:
        self.log(logging.DEBUG, message, notify=notify)

    def info(self, message: str, *, notify: bool = False) -> None:
        self.log(logging.INFO, message, notify=notify)

    def warning(self, message: str, *, notify: bool = False) -> None:
        self.log(logging.WARNING, message, notify=notify)

    def exception(self, message: str, *, notify: bool = False) -> None:
        self.log(logging.ERROR, message, exc_info=True, notify=notify)

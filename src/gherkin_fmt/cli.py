from __future__ import annotations

import os
import sys
import logging

from typing import Optional
from argparse import Namespace as Arguments
from pathlib import Path

from colorama import init, Fore

from gherkin_fmt.constants import FILE_MODE
from gherkin_fmt.errors import EncodingError, FileAccessError, FormatError, ParseError
from gherkin_fmt.parser import parse_document
from gherkin_fmt.renderer import Options, render


logger = logging.getLogger(__name__)


def _opener(path: str, flags: int) -> int:
    return os.open(path, flags, FILE_MODE)


def _colorize(text: str, color: str) -> str:
    if not sys.stdout.isatty():
        return text

    return f'{color}{text}{Fore.RESET}'


def skip_to_text(path: str, error: FormatError) -> str:
    return f'{_colorize("skip", Fore.YELLOW)} {path}: {error}'


def format_file(path: Path, options: Options) -> Optional[str]:
    """Format a single feature file.

    Returns the formatted content, or `None` if `path` is a directory. Unless
    `options.dry` is set, the file is rewritten with the formatted content.
    """
    if path.is_dir():
        logger.debug(f'{path} is a directory, skipping')
        return None

    try:
        source = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise FileAccessError(f'could not open "{path}": {e}') from e

    try:
        document = parse_document(source)
    except ParseError as e:
        raise ParseError(f'could not parse "{path}": {e}') from e

    content = render(document, options)

    # encode before the file is truncated
    try:
        data = content.encode('utf-8')
    except UnicodeEncodeError as e:
        raise EncodingError(f'could not encode "{path}": {e}') from e

    if not options.dry:
        try:
            with open(path, 'wb', opener=_opener) as fd:
                fd.write(data)
        except OSError as e:
            raise FileAccessError(f'could not write "{path}": {e}') from e

        logger.debug(f'wrote {len(data)} bytes to {path}')

    return content


def cli(args: Arguments) -> int:
    # init colorama for ansi colors
    init()

    options = Options(indent=args.indent, align=args.align, dry=args.dry)

    for file in args.files:
        try:
            content = format_file(Path(file), options)
        except FormatError as e:
            logger.debug(f'{file}: {e.__class__.__name__}')
            print(skip_to_text(file, e))
            continue

        if options.dry and content is not None:
            print(content)

        print(file)

    return 0

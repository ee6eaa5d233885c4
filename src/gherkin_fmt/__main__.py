import sys
import argparse
import logging

from typing import List, Optional

from gherkin_fmt.cli import cli
from gherkin_fmt.constants import ALIGNMENTS, DEFAULT_ALIGN, DEFAULT_INDENT


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f'"{value}" is not an integer')

    if number < 0:
        raise argparse.ArgumentTypeError(f'{number} is not a non-negative integer')

    return number


def parse_arguments() -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog='gherkin-fmt', description='format gherkin feature files')

    parser.add_argument(
        'files',
        nargs='*',
        type=str,
        help='feature files to format',
    )

    parser.add_argument(
        '--dry',
        action='store_true',
        required=False,
        default=False,
        help='run in dry mode, print the formatted result instead of rewriting the file',
    )

    parser.add_argument(
        '--indent',
        type=_non_negative_int,
        default=DEFAULT_INDENT,
        required=False,
        help='amount of whitespaces for indentation',
    )

    parser.add_argument(
        '--align',
        type=str,
        choices=ALIGNMENTS,
        default=DEFAULT_ALIGN,
        required=False,
        help='align tables left|right',
    )

    parser.add_argument(
        '--lsp',
        action='store_true',
        required=False,
        default=False,
        help='run as a language server providing document formatting',
    )

    parser.add_argument(
        '--socket',
        action='store_true',
        required=False,
        default=False,
        help='run language server in socket mode',
    )

    parser.add_argument(
        '--socket-port',
        type=int,
        default=4444,
        required=False,
        help='port the language server should listen on',
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        required=False,
        default=False,
        help='verbose output',
    )

    parser.add_argument(
        '--no-verbose',
        nargs='+',
        type=str,
        default=None,
        help='name of loggers to disable',
    )

    parser.add_argument(
        '--version',
        action='store_true',
        required=False,
        default=False,
        help='print version and exit',
    )

    args = parser.parse_args()

    if args.version:
        from gherkin_fmt import __version__

        print(__version__, file=sys.stderr)

        raise SystemExit(0)

    if args.socket and not args.lsp:
        parser.error('--socket requires --lsp')

    return args


def setup_logging(args: argparse.Namespace) -> None:
    handlers: List[logging.Handler] = []
    level = logging.INFO if not args.verbose else logging.DEBUG

    if args.lsp and not args.socket:
        # stdout is the protocol channel
        if level < logging.INFO:
            handlers = [logging.FileHandler('gherkin-fmt.log')]
    else:
        handlers = [logging.StreamHandler(sys.stderr)]

    logging.basicConfig(
        level=level,
        format='[%(asctime)s] %(levelname)s: %(message)s',
        handlers=handlers,
    )

    no_verbose: Optional[List[str]] = args.no_verbose

    if no_verbose is None:
        no_verbose = []

    for logger_name in no_verbose:
        if logger_name in logging.Logger.manager.loggerDict:
            logger = logging.getLogger(logger_name)
            logger.setLevel(logging.ERROR)
        else:
            print(f'!! logger "{logger_name}" does not exist', file=sys.stderr)

    # always supress these loggers
    logging.getLogger('pygls').setLevel(logging.ERROR)


def main() -> int:
    args = parse_arguments()

    setup_logging(args)

    if args.lsp:
        from gherkin_fmt.server import server

        if not args.socket:
            server.start_io(sys.stdin.buffer, sys.stdout.buffer)  # type: ignore
        else:
            server.start_tcp('127.0.0.1', args.socket_port)  # type: ignore

        return 0

    return cli(args)


if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())

import argparse
import logging
import os
import platform
import sys
from .. import __version__
from ..common import logformat, RestructureError
from ..utils.reporting import DummyReportGenerator, TextReportGenerator


version_text = 'restructure {} on {} {} on {}'.format(
    __version__, platform.python_implementation(), platform.python_version(),
    platform.platform())


def log_level(s):
    """ Converts a string to a valid logging level """
    numeric_level = getattr(logging, s.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError('Invalid log level: {}'.format(s))
    return numeric_level


class OnceAction(argparse.Action):
    """ Use this action to enforce that an option is only given once """
    def __call__(self, parser, namespace, values, option_string=None):
        if getattr(namespace, self.dest, None) is not None:
            raise argparse.ArgumentError(self, 'Cannot give multiple')
        setattr(namespace, self.dest, values)


base_parser = argparse.ArgumentParser(add_help=False)
base_parser.add_argument(
    '--log', help='Log level (info,debug,warn)', metavar='log-level',
    type=log_level, default='info')
base_parser.add_argument(
    '--report', metavar='report-file', action=OnceAction,
    help='Write a report of the control flow recovery into a text file',
    type=argparse.FileType('w'))
base_parser.add_argument(
    '--verbose', '-v', action='count', default=0,
    help='Increase verbosity of the output')
base_parser.add_argument(
    '--version', '-V', action='version', version=version_text,
    help='Display version and exit')


class ColoredFormatter(logging.Formatter):
    """ Custom formatter that makes vt100 coloring to log messages """
    BLACK, RED, GREEN, YELLOW, BLUE, MAGENTA, CYAN, WHITE = range(8)
    colors = {
        'INFO': WHITE,
        'WARNING': YELLOW,
        'ERROR': RED
    }

    def format(self, record):
        reset_seq = '\033[0m'
        color_seq = '\033[1;%dm'
        levelname = record.levelname
        msg = super().format(record)
        if levelname in self.colors:
            color = color_seq % (30 + self.colors[levelname])
            msg = color + msg + reset_seq
        return msg


class LogSetup:
    """ Context manager that attaches logging and reporting to a snippet.

    Expected errors are logged and reported, after which the program exits
    with status 1.
    """
    def __init__(self, args):
        self.args = args
        self.console_handler = None
        self.reporter = None
        self.logger = logging.getLogger()

    def __enter__(self):
        self.logger.setLevel(logging.DEBUG)
        self.console_handler = logging.StreamHandler()
        self.console_handler.setFormatter(ColoredFormatter(logformat))
        self.console_handler.setLevel(self.args.log)
        self.logger.addHandler(self.console_handler)

        if self.args.verbose > 0:
            self.console_handler.setLevel(logging.DEBUG)
        elif getattr(self.args, 'quiet', False):
            self.console_handler.setLevel(logging.WARNING)

        if self.args.report:
            self.reporter = TextReportGenerator(self.args.report)
        else:
            self.reporter = DummyReportGenerator()
        self.reporter.header()
        self.logger.debug('Reporting to %s', self.reporter)
        self.logger.debug('Loggers attached')
        self.logger.debug(version_text)
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        err = False
        if isinstance(exc_value, RestructureError):
            self.logger.error(str(exc_value.msg))
            if exc_value.loc:
                exc_value.print(file=sys.stderr)

            # Report the error:
            self.reporter.dump_error(exc_value)
            err = True
        elif isinstance(exc_value, FileNotFoundError):
            self.logger.error('File not found %s', exc_value)
            err = True
        elif exc_type and not issubclass(exc_type, SystemExit):
            self.reporter.dump_exception((exc_type, exc_value, traceback))

        if exc_value is not None:
            # Exception happened, close file and remove
            output = getattr(self.args, 'output', None)
            if output and output not in (sys.stdout, sys.__stdout__):
                output.close()
                if hasattr(output, 'name') and os.path.exists(output.name):
                    os.remove(output.name)

        self.logger.debug('Removing loggers')
        self.reporter.footer()
        if self.args.report:
            self.args.report.close()

        self.logger.removeHandler(self.console_handler)

        # exit code when error:
        if err:
            sys.exit(1)

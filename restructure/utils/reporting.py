"""
    To keep track of what happened during control flow recovery, this file
    implements several reporting types.

    Reports can be written to plain text, or dropped altogether.
"""

import abc
import traceback
import io
from .. import __version__
from ..common import RestructureError
from ..format.dot import cfg_to_dot


class ReportGenerator(metaclass=abc.ABCMeta):
    """ Implement all these function to create a custom reporting generator """

    def header(self):
        pass

    def footer(self):
        pass

    def close(self):
        pass

    def __enter__(self):
        self.header()
        return self

    def __exit__(self, exc_type, exc_value, tb):
        if isinstance(exc_value, RestructureError):
            self.dump_error(exc_value)
        elif exc_type:
            self.dump_exception((exc_type, exc_value, tb))

        self.footer()

    @abc.abstractmethod
    def heading(self, level, title):
        raise NotImplementedError()

    @abc.abstractmethod
    def message(self, msg):
        raise NotImplementedError()

    @abc.abstractmethod
    def dump_raw_text(self, text):
        raise NotImplementedError()

    def dump_graph(self, cfg):
        pass

    def dump_primitive(self, prim):
        pass

    def dump_incomplete(self, error):
        pass

    def dump_collapsed(self, header, labels):
        pass

    @abc.abstractmethod
    def dump_exception(self, einfo):
        """ List the given exception in report """
        raise NotImplementedError()

    def dump_error(self, error):
        self.heading(3, 'Error')
        f = io.StringIO()
        error.print(file=f)
        self.dump_raw_text(f.getvalue())


class DummyReportGenerator(ReportGenerator):
    """ Report generator which reports into the void """
    def heading(self, level, title):
        pass

    def message(self, msg):
        pass

    def dump_exception(self, einfo):
        pass

    def dump_raw_text(self, text):
        pass


class TextReportGenerator(ReportGenerator):
    """ Report generator which writes plain text to dump_file """
    def __init__(self, dump_file):
        self.dump_file = dump_file

    def close(self):
        self.dump_file.close()

    def print(self, *args, end='\n'):
        """ Convenience helper for printing to dumpfile """
        print(*args, end=end, file=self.dump_file)

    def header(self):
        self.print('Restructure report (version {})'.format(__version__))

    def heading(self, level, title):
        self.print()
        self.print(title)
        markers = {1: '=', 2: '-'}
        marker = markers[level] if level in markers else '~'
        self.print(marker * len(title))
        self.print()

    def message(self, msg):
        self.print(msg)

    def dump_raw_text(self, text):
        self.print(text)

    def dump_graph(self, cfg):
        """ Write the graph in dot format """
        self.print(cfg_to_dot(cfg))

    def dump_primitive(self, prim):
        self.print('- {}'.format(prim))

    def dump_incomplete(self, error):
        self.heading(2, 'Incomplete')
        self.print(error.msg)

    def dump_collapsed(self, header, labels):
        """ An interval was collapsed without locating a primitive """
        self.print('- collapsed interval {}: {}'.format(
            header, ', '.join(map(str, labels))))

    def dump_exception(self, einfo):
        self.print(''.join(traceback.format_exception(*einfo)))

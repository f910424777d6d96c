import click

import logging
logger = logging.getLogger("udpprobe")


class RecordLog:
    """Line oriented sink for session records and the closing summary.

    Writes to `path`, or to stdout when no path (or '-') is given. Every
    line is flushed immediately so a killed session keeps its records.
    """

    def __init__(self, path=None):
        self.path = path
        if path in (None, '-'):
            self.file = None
        else:
            self.file = click.open_file(path, 'w')
            logger.debug("writing records to %s", path)
        self.closed = False

    def write(self, line):
        if self.closed:
            logger.debug("record dropped, log closed: %s", line)
            return
        click.echo(line, file=self.file)
        if self.file is not None:
            self.file.flush()

    def writelines(self, lines):
        for line in lines:
            self.write(line)

    def close(self):
        if self.closed:
            return
        self.closed = True
        if self.file is not None:
            self.file.flush()
            self.file.close()

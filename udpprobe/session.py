import threading

from udpprobe.statistics import summary_lines
from udpprobe.utils import close_timestamp

import logging
logger = logging.getLogger("udpprobe")


class ProbeSession:
    """Resources of one sender or responder run.

    shutdown() releases them in order (multicast membership, transport,
    statistics, record log) and runs at most once no matter how often or
    from which thread it is called.
    """

    def __init__(self, transport, stats=None, records=None, send_only=False):
        self.transport = transport
        self.stats = stats
        self.records = records
        self.send_only = send_only
        self.summary = None
        self._lock = threading.RLock()
        self._closed = False

    @property
    def closed(self):
        return self._closed

    def record(self, line):
        with self._lock:
            if self.records is not None and not self._closed:
                self.records.write(line)

    def shutdown(self):
        with self._lock:
            if self._closed:
                return self.summary
            self._closed = True

            self.transport.drop_multicast()
            self.transport.close()
            if self.stats is not None:
                self.summary = self.stats.finalize(close_timestamp())
                if self.records is not None:
                    self.records.writelines(summary_lines(self.summary, self.send_only))
            if self.records is not None:
                self.records.close()
            logger.info("Communication end.")
            return self.summary

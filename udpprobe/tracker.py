import enum


class Observation(enum.Enum):
    MATCHED = 'matched'
    MISMATCH = 'mismatch'


class SequenceTracker:
    """Sender side sequence bookkeeping.

    Only one probe is outstanding at a time, so a reply either belongs
    to the last probe sent or it does not.
    """

    def __init__(self, start=0):
        self.expected_next = start
        self.gaps = 0

    def next_sequence(self):
        sequence = self.expected_next
        self.expected_next += 1
        return sequence

    @property
    def last_sent(self):
        if self.expected_next == 0:
            return None
        return self.expected_next - 1

    def observe(self, received_sequence):
        if self.expected_next > 0 and received_sequence == self.expected_next - 1:
            return Observation.MATCHED
        self.gaps += 1
        return Observation.MISMATCH

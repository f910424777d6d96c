import struct

# protocol
MAGIC = 0xFEFEFEFE
HEADER_FORMAT = '!IQQQ'
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)
BUFFER_SIZE = 4096
NANOS = 1000000000

# defaults
PORT_DEFAULT = 20001
INTERVAL_DEFAULT = 10000000      # nanoseconds
COUNT_DEFAULT = 0                # 0: unbounded
TIMEOUT_DEFAULT = 0              # milliseconds, 0: block indefinitely
DATAGRAM_SIZE_DEFAULT = 86
PAYLOAD_DEFAULT = DATAGRAM_SIZE_DEFAULT - HEADER_SIZE
TOS_DEFAULT = 0
TOS_MAX = 63

DSCP_MAP = {
    'be': 0,
    'cp1': 1, 'cp2': 2, 'cp3': 3, 'cp4': 4, 'cp5': 5, 'cp6': 6, 'cp7': 7,
    'cs1': 8,
    'cp9': 9, 'af11': 10, 'cp11': 11, 'af12': 12, 'cp13': 13, 'af13': 14, 'cp15': 15,
    'cs2': 16,
    'cp17': 17, 'af21': 18, 'cp19': 19, 'af22': 20, 'cp21': 21, 'af23': 22, 'cp23': 23,
    'cs3': 24,
    'cp25': 25, 'af31': 26, 'cp27': 27, 'af32': 28, 'cp29': 29, 'af33': 30, 'cp31': 31,
    'cs4': 32,
    'cp33': 33, 'af41': 34, 'cp35': 35, 'af42': 36, 'cp37': 37, 'af43': 38, 'cp39': 39,
    'cs5': 40,
    'cp41': 41, 'cp42': 42, 'cp43': 43, 'cp44': 44, 'cp45': 45, 'ef': 46, 'cp47': 47,
    'nc1': 48,
    'cp49': 49, 'cp50': 50, 'cp51': 51, 'cp52': 52, 'cp53': 53, 'cp54': 54, 'cp55': 55,
    'nc2': 56,
    'cp57': 57, 'cp58': 58, 'cp59': 59, 'cp60': 60, 'cp61': 61, 'cp62': 62, 'cp63': 63,
}
POLL_INTERVAL = 0.1              # seconds between cancellation checks

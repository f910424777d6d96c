#!/usr/bin/python

##############################################################################
#                                                                            #
#  Objective:                                                                #
#    Python implementation of a minimal UDP probe protocol to measure        #
#    round-trip latency and packet loss between two endpoints.               #
#                                                                            #
#  Features supported:                                                       #
#    - fixed 28 byte probe header (magic, sequence, monotonic timestamp)     #
#    - configurable payload size and send interval (nanoseconds)             #
#    - ToS/DSCP marking, multicast, broadcast and multicast loopback         #
#    - send-only sender and echo/silent responder                            #
#    - per probe records (time difference or system clock)                   #
#    - Loss statistics, RTT min/max/avg and jitter (RFC1889)                 #
#                                                                            #
#  Modes of operation:                                                       #
#    - Sender                                                                #
#        paces probes, matches replies, records latency and loss             #
#    - Responder                                                             #
#        validates probes and echoes them back verbatim                      #
#                                                                            #
#  Limitations:                                                              #
#    Only one probe is outstanding at a time. A reply that does not match    #
#    the last probe sent is counted as missing.                              #
#    Timestamps come from the sender's monotonic clock and are never         #
#    compared across machines.                                               #
#    As there is no hardware based timestamping, latency values measured     #
#    by this tool are not very precise.                                      #
#                                                                            #
#  Not yet supported:                                                        #
#    - several probes in flight (would need a map of outstanding sequences)  #
#    - IPv6 multicast                                                        #
#                                                                            #
##############################################################################

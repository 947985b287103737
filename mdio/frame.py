##
## This file is part of the libsigrokdecode project.
##
## Copyright (C) 2024 sigrok contributors
##
## This program is free software; you can redistribute it and/or modify
## it under the terms of the GNU General Public License as published by
## the Free Software Foundation; either version 2 of the License, or
## (at your option) any later version.
##
## This program is distributed in the hope that it will be useful,
## but WITHOUT ANY WARRANTY; without even the implied warranty of
## MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
## GNU General Public License for more details.
##
## You should have received a copy of the GNU General Public License
## along with this program; if not, see <http://www.gnu.org/licenses/>.
##

'''
Frame attempt state machine and field decoding.

Bit layout of a clause 22 MDIO frame, by 0-based bit index:

     0..31  PRE    32 ones
    32..33  ST     01
    34..35  OP     10 read, 01 write
    36..40  PHYAD  MSB first
    41..45  REGAD  MSB first
    46..47  TA     write: driven 10 by the MAC; read: Z0, PHY takes the bus
    48..63  DATA   MSB first

Bits 0..45 are always driven by the MAC. From bit 46 on a read frame is driven
by the PHY and has to be sampled late in the clock cycle.
'''

import logging
from collections import namedtuple
from enum import Enum, IntEnum

from .errors import FrameSyncFailure, IndexRangeError
from .timing import FRAME_BITS

logger = logging.getLogger(__name__)

PREAMBLE_BITS = 32
START_END = 34
OPCODE_END = 36
PHY_ADDR_END = 41
REG_ADDR_END = 46
TA_START = REG_ADDR_END
WRITE_TA_BITS = 1
# Writes label bit 46 alone and skip bit 47. Reads label 46..47 as TA but
# their data field already starts at bit 47.
READ_TA_BITS = 2
WRITE_DATA_START = 48
READ_DATA_START = 47
DATA_BITS = 16

class Category(IntEnum):
    STRUCTURAL = 0
    OPCODE = 1
    ADDRESS = 2
    TURNAROUND = 3
    DATA = 4
    DIAGNOSTIC = 5

FieldEvent = namedtuple('FieldEvent', 'start_sample end_sample category label')

class Phase(Enum):
    SEEK_START = 'seek-start'
    PREAMBLE = 'preamble'
    START = 'start'
    OPCODE = 'opcode'
    PHY_ADDR = 'phy-addr'
    REG_ADDR = 'reg-addr'
    TURNAROUND = 'turnaround'
    DATA = 'data'
    DONE = 'done'

def rising_edges(mdc, start=1):
    # Start at 1 at the earliest so that i - 1 is always a valid index.
    for i in range(max(start, 1), len(mdc)):
        if not mdc[i - 1] and mdc[i]:
            yield i

def decode_unsigned(bits, start_idx, end_idx, errors=None):
    '''Return bits[start_idx..end_idx] (inclusive) as an MSB-first integer.

    Invalid bounds never raise: an IndexRangeError is logged, appended to
    ``errors`` if given, and 0 is returned in place of the field value.
    '''
    if start_idx > end_idx or start_idx < 0 or end_idx >= len(bits):
        err = IndexRangeError(start_idx, end_idx, len(bits))
        logger.warning('%s', err)
        if errors is not None:
            errors.append(err)
        return 0

    val = 0
    for idx in range(start_idx, end_idx + 1):
        val = (val << 1) | (1 if bits[idx] else 0)
    return val

def bit_string(bits, start_idx, end_idx):
    return ''.join('1' if b else '0' for b in bits[start_idx:end_idx + 1])

def opcode_label(first, second):
    '''Return (label, is_read) for the two opcode bits.'''
    if first and not second:
        return 'R', True
    if not first and second:
        return 'W', False
    # Some extensions allow other values.
    return bit_string((first, second), 0, 1), False

class FrameAttempt:
    '''Try to decode one frame starting at a given MDC rising edge.

    Annotations are appended to ``result`` as soon as each field is complete,
    so fields decoded before an abort stay in the output.
    '''

    def __init__(self, mdc, mdio, timing, result):
        self.mdc = mdc
        self.mdio = mdio
        self.timing = timing
        self.result = result
        self.reset()

    def reset(self):
        self.start_index = -1
        self.bit_indices = []
        self.bit_values = []
        self.is_read = None
        self.phase = Phase.SEEK_START

    @property
    def bitcount(self):
        return len(self.bit_values)

    def put(self, first_bit, last_bit, category, label):
        ss = self.bit_indices[first_bit]
        es = self.bit_indices[last_bit] + self.timing.bit_sample_length
        self.result.append(FieldEvent(ss, es, category, label))

    def fail(self, reason):
        raise FrameSyncFailure(self.start_index, self.bitcount, reason)

    def sample_bit(self, edge):
        if self.bitcount < TA_START or not self.is_read:
            # MAC-driven: stable 10 ns around the edge.
            return self.mdio[edge]
        index = edge + self.timing.read_sample_offset
        if index >= len(self.mdio):
            self.fail('PHY-driven sample %d beyond end of capture' % index)
        return self.mdio[index]

    def handle_bit(self, edge):
        value = bool(self.sample_bit(edge))
        self.bit_indices.append(edge)
        self.bit_values.append(value)
        self.process_state(self.phase)

    def process_state(self, phase):
        method = getattr(self, 'state_' + phase.name)
        return method()

    def state_SEEK_START(self):
        if not self.bit_values[0]:
            self.fail('MDIO low at first edge')
        self.phase = Phase.PREAMBLE

    def state_PREAMBLE(self):
        if not self.bit_values[-1]:
            self.fail('preamble bit %d is 0' % (self.bitcount - 1))
        if self.bitcount == PREAMBLE_BITS:
            self.phase = Phase.START

    def state_START(self):
        if self.bitcount < START_END:
            return
        if self.bit_values[PREAMBLE_BITS:START_END] != [False, True]:
            self.fail('start bits are %s, not 01'
                      % bit_string(self.bit_values, PREAMBLE_BITS, START_END - 1))
        self.put(0, PREAMBLE_BITS - 1, Category.STRUCTURAL, 'PREAMBLE')
        self.put(PREAMBLE_BITS, START_END - 1, Category.STRUCTURAL, 'S')
        self.phase = Phase.OPCODE

    def state_OPCODE(self):
        if self.bitcount < OPCODE_END:
            return
        label, self.is_read = opcode_label(*self.bit_values[START_END:OPCODE_END])
        self.put(START_END, OPCODE_END - 1, Category.OPCODE, label)
        self.phase = Phase.PHY_ADDR

    def state_PHY_ADDR(self):
        if self.bitcount < PHY_ADDR_END:
            return
        self.put_address(OPCODE_END, PHY_ADDR_END - 1)
        self.phase = Phase.REG_ADDR

    def state_REG_ADDR(self):
        if self.bitcount < REG_ADDR_END:
            return
        self.put_address(PHY_ADDR_END, REG_ADDR_END - 1)
        self.phase = Phase.TURNAROUND

    def put_address(self, first_bit, last_bit):
        addr = decode_unsigned(self.bit_values, first_bit, last_bit,
                               self.result.errors)
        self.put(first_bit, last_bit, Category.ADDRESS, "10'%d" % addr)

    def state_TURNAROUND(self):
        if self.is_read:
            if self.bitcount < TA_START + READ_TA_BITS:
                return
            self.put(TA_START, TA_START + READ_TA_BITS - 1,
                     Category.TURNAROUND, 'TA')
        else:
            if self.bitcount < TA_START + WRITE_TA_BITS:
                return
            self.put(TA_START, TA_START, Category.TURNAROUND,
                     bit_string(self.bit_values, TA_START, TA_START))
        self.phase = Phase.DATA

    def state_DATA(self):
        first_bit = READ_DATA_START if self.is_read else WRITE_DATA_START
        last_bit = first_bit + DATA_BITS - 1
        if self.bitcount <= last_bit:
            return
        self.put(first_bit, last_bit, Category.DATA,
                 bit_string(self.bit_values, first_bit, last_bit))
        self.phase = Phase.DONE

    def run(self, start_index):
        '''Decode from start_index; return True if a whole frame was seen.'''
        self.reset()
        self.start_index = start_index
        try:
            for edge in rising_edges(self.mdc, start_index):
                self.handle_bit(edge)
                if self.phase is Phase.DONE:
                    return True
                if self.bitcount == FRAME_BITS:
                    break
        except FrameSyncFailure as e:
            logger.debug('%s', e)
        return False

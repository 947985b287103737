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
MDIO (Management Data Input/Output, IEEE 802.3 clause 22) is the two-wire
management bus between an Ethernet MAC and its (G)MII PHYs.

Frames are clocked on rising edges of MDC. Each frame starts with a 32-bit
all-ones preamble and carries a read or write opcode, a 5-bit PHY address, a
5-bit register address, turnaround bits and 16 data bits.

Pass the clock as the MDC channel and the data line as the MDIO channel.
Captures need at most 20 ns per sample.
'''

__version__ = "0.1.0"

from .errors import (ChannelError, ConfigurationError, FrameSyncFailure,
                     IndexRangeError, InsufficientDataError, MdioDecodeError,
                     VcdError)
from .frame import Category, FieldEvent
from .pd import Decoder, DecodeResult, decode

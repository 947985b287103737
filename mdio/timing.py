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
MDC timing model and preflight checks.

Per IEEE 802.3 clause 22, when the MAC drives MDIO it keeps the line stable
10 ns before and 10 ns after the rising edge of MDC. When the PHY drives MDIO
the value becomes valid anywhere between 0 and 300 ns after the rising edge.
With the 400 ns minimum clock period (2.5 MHz) that leaves the 300-400 ns
window for sampling PHY-driven bits.
'''

import math
from collections import namedtuple

from .errors import ConfigurationError, InsufficientDataError

MINIMUM_CLOCK_PERIOD = 400e-9

# Above this, an edge-aligned sample is no longer guaranteed to fall inside
# the 10 ns hold window of master-driven bits.
MAXIMUM_SAMPLE_PERIOD = 20e-9

# Slack for ratios such as 400e-9 / 10e-9 landing just below an integer.
FLOOR_TOLERANCE = 1e-9

FRAME_BITS = 64

TimingParameters = namedtuple('TimingParameters',
    'bit_sample_length read_sample_offset maximum_sample_period')

def _floor(value):
    return int(math.floor(value + FLOOR_TOLERANCE))

def timing_parameters(sample_period):
    ratio = MINIMUM_CLOCK_PERIOD / sample_period
    bit_sample_length = max(_floor(ratio) - 1, 0)
    # PHY-driven bits are sampled ~350 ns after the edge, give or take a sample.
    read_sample_offset = _floor(ratio * 7 / 8)
    return TimingParameters(bit_sample_length, read_sample_offset,
                            MAXIMUM_SAMPLE_PERIOD)

def preflight(num_samples, sample_period, timing):
    '''Raise a PreflightError if the capture cannot be decoded reliably.

    Hosts often hand in short viewport-sized buffers for fast previews; a
    buffer that cannot hold a full 64-bit frame is refused up front rather
    than scanned.
    '''
    if sample_period > timing.maximum_sample_period:
        raise ConfigurationError('sample period %g s exceeds %g s'
                                 % (sample_period, timing.maximum_sample_period))
    if FRAME_BITS * timing.bit_sample_length > num_samples:
        raise InsufficientDataError('%d samples cannot hold %d bits of %d samples'
                                    % (num_samples, FRAME_BITS,
                                       timing.bit_sample_length))

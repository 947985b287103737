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
Output format:

decode() and Decoder.process() return a DecodeResult, a list of FieldEvent
tuples in the order they were found:

  (<start_sample>, <end_sample>, <category>, <label>)

<category> (Category, index into Decoder.annotations):
 - STRUCTURAL: 'PREAMBLE', 'S'
 - OPCODE: 'R', 'W', or the literal opcode bits for extensions
 - ADDRESS: PHY and register address, "10'<decimal>"
 - TURNAROUND: 'TA' for reads, the literal first TA bit for writes
 - DATA: the 16 data bits, MSB first, as a '0'/'1' string
 - DIAGNOSTIC: capture could not be decoded (only ever the sole event)

Sample numbers index the MDC/MDIO sequences; end_sample is inclusive.
'''

import logging

from .errors import ChannelError, ConfigurationError, PreflightError
from .frame import Category, FieldEvent, FrameAttempt, rising_edges
from .timing import preflight, timing_parameters

logger = logging.getLogger(__name__)

SRD_CONF_SAMPLERATE = 'samplerate'

class DecodeResult(list):
    '''Decoded field events, plus the recoverable errors hit on the way.'''

    def __init__(self, events=()):
        super().__init__(events)
        self.errors = []

def diagnostic(err, num_samples):
    ss = err.span[0] * num_samples // 10
    es = err.span[1] * num_samples // 10
    return FieldEvent(ss, es, Category.DIAGNOSTIC, err.label)

def decode(mdc, mdio, sample_period):
    '''Decode every MDIO frame in a capture.

    Every MDC rising edge with MDIO high is tried as a frame start, including
    edges inside frames that were already decoded.
    '''
    timing = timing_parameters(sample_period)
    result = DecodeResult()

    try:
        preflight(len(mdc), sample_period, timing)
    except PreflightError as e:
        logger.info('Not decoding: %s', e)
        result.append(diagnostic(e, len(mdc)))
        result.errors.append(e)
        return result

    attempt = FrameAttempt(mdc, mdio, timing, result)
    frames = 0
    for edge in rising_edges(mdc):
        # A preamble starts with a one.
        if not mdio[edge]:
            continue
        if attempt.run(edge):
            frames += 1

    logger.debug('Decoded %d frame(s), %d event(s) from %d samples',
                 frames, len(result), len(mdc))
    return result

class Decoder:
    id = 'mdio'
    name = 'MDIO'
    longname = 'Management Data Input/Output'
    desc = "Decoder for (G)MII-compliant network devices' MDIO control protocol."
    license = 'gplv2+'
    inputs = ['logic']
    outputs = ['mdio']
    tags = ['Networking']

    channels = (
        {'id': 'mdc', 'name': 'MDC', 'desc': 'Clock'},
        {'id': 'mdio', 'name': 'MDIO', 'desc': 'Data'},
    )
    options = ()

    # Indexed by Category.
    annotations = (
        ('structural', 'Preamble and start bits'),
        ('opcode', 'Opcode'),
        ('address', 'PHY/register address'),
        ('turnaround', 'Turnaround'),
        ('data', 'Data'),
        ('diagnostic', 'Decoder diagnostic'),
    )
    annotation_rows = (
        ('fields', 'Fields', (0, 1, 2, 3, 4)),
        ('diagnostics', 'Diagnostics', (5,)),
    )

    # Hint for the host's sampling and display; not used while decoding.
    toggle_rates = {'MDC': 'high', 'MDIO': 'medium'}

    def __init__(self):
        self.reset()

    def reset(self):
        self.samplerate = None

    def metadata(self, key, value):
        if key == SRD_CONF_SAMPLERATE:
            self.samplerate = value

    def process(self, input_waveforms, parameters=None, sample_period=None):
        '''Decode one capture; ``parameters`` is accepted and ignored.'''
        if sample_period is None:
            if not self.samplerate:
                raise ConfigurationError('no sample period and no samplerate')
            sample_period = 1.0 / self.samplerate
        if sample_period <= 0:
            raise ConfigurationError('sample period must be positive, got %r'
                                     % sample_period)

        for channel in self.channels:
            if channel['name'] not in input_waveforms:
                raise ChannelError('missing channel %s' % channel['name'])
        mdc = input_waveforms['MDC']
        mdio = input_waveforms['MDIO']
        if len(mdc) != len(mdio):
            raise ChannelError('MDC has %d samples but MDIO has %d'
                               % (len(mdc), len(mdio)))

        return decode(mdc, mdio, sample_period)

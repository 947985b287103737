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
Minimal Value Change Dump reader.

Turns the scalar (1-bit) signals of a VCD file into uniformly sampled boolean
lists that can be handed to Decoder.process(). Vector and real value changes
are skipped; x and z read as low.
'''

import logging
import os
import re
from collections import namedtuple

from .errors import VcdError
from .timing import FLOOR_TOLERANCE

logger = logging.getLogger(__name__)

Capture = namedtuple('Capture', 'channels sample_period')

TIMESCALE_UNITS = {
    's': 1.0,
    'ms': 1e-3,
    'us': 1e-6,
    'ns': 1e-9,
    'ps': 1e-12,
    'fs': 1e-15,
}
TIMESCALE_RE = re.compile(r'^(1|10|100)\s*(s|ms|us|ns|ps|fs)$')

# Keywords whose bodies hold value changes rather than declarations.
DUMP_KEYWORDS = ('$dumpvars', '$dumpall', '$dumpon', '$dumpoff', '$end')

def _section_body(tokens, keyword):
    body = []
    for tok in tokens:
        if tok == '$end':
            return body
        body.append(tok)
    raise VcdError('%s without $end' % keyword)

def _parse_timescale(body):
    m = TIMESCALE_RE.match(' '.join(body))
    if not m:
        raise VcdError('unsupported timescale %r' % ' '.join(body))
    return int(m.group(1)) * TIMESCALE_UNITS[m.group(2)]

def _resample(changes, step, num_samples):
    samples = []
    value = False
    pos = 0
    for i in range(num_samples):
        t = i * step + FLOOR_TOLERANCE
        while pos < len(changes) and changes[pos][0] <= t:
            value = changes[pos][1]
            pos += 1
        samples.append(value)
    return samples

def parse_vcd(text, sample_period=None):
    if sample_period is not None and sample_period <= 0:
        raise VcdError('sample period must be positive, got %r' % sample_period)

    tokens = iter(text.split())
    unit = None
    names = {}
    changes = {}
    now = end_time = 0

    for tok in tokens:
        if tok in DUMP_KEYWORDS:
            continue
        if tok.startswith('$'):
            body = _section_body(tokens, tok)
            if tok == '$timescale':
                unit = _parse_timescale(body)
            elif tok == '$var':
                if len(body) < 4:
                    raise VcdError('malformed $var: %s' % ' '.join(body))
                if body[1] == '1':
                    # One identifier may be declared under several names.
                    aliases = names.setdefault(body[2], [])
                    if body[3] not in aliases:
                        aliases.append(body[3])
                    changes.setdefault(body[3], [])
        elif tok.startswith('#'):
            try:
                now = int(tok[1:])
            except ValueError:
                raise VcdError('bad timestamp %r' % tok) from None
            end_time = max(end_time, now)
        elif tok[0] in 'bBrR':
            # Vector/real change; its identifier is the next token.
            next(tokens, None)
        elif tok[0] in '01xXzZ' and len(tok) > 1:
            for name in names.get(tok[1:], ()):
                changes[name].append((now, tok[0] == '1'))
        else:
            raise VcdError('unexpected token %r' % tok)

    if unit is None:
        raise VcdError('missing $timescale')
    if not changes:
        raise VcdError('no 1-bit signals declared')

    if sample_period is None:
        sample_period = unit
    step = sample_period / unit
    num_samples = int(end_time / step + FLOOR_TOLERANCE) + 1

    channels = {name: _resample(c, step, num_samples)
                for name, c in changes.items()}
    logger.debug('Loaded %d signal(s), %d samples at %g s/sample',
                 len(channels), num_samples, sample_period)
    return Capture(channels, sample_period)

def load_vcd(source, sample_period=None):
    '''Load a VCD capture from a path or an open text file.'''
    if isinstance(source, (str, bytes, os.PathLike)):
        with open(source, 'r') as f:
            return parse_vcd(f.read(), sample_period)
    return parse_vcd(source.read(), sample_period)

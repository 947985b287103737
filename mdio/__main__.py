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
Decode MDIO frames from a VCD capture and print one line per field:

    <start_sample>-<end_sample> <category> <label>
'''

import argparse
import logging
import sys

from .errors import MdioDecodeError
from .pd import Decoder
from .vcd import load_vcd

def main(argv=None):
    parser = argparse.ArgumentParser(prog='mdio-decode',
        description='Decode MDIO management frames from a VCD capture.')
    parser.add_argument('capture', help='VCD file')
    parser.add_argument('--mdc', default='MDC', help='VCD signal carrying MDC (default: %(default)s)')
    parser.add_argument('--mdio', default='MDIO', help='VCD signal carrying MDIO (default: %(default)s)')
    parser.add_argument('--sample-period', type=float, default=None,
                        help='resample at this many seconds per sample (default: VCD timescale)')
    parser.add_argument('-v', '--verbose', action='store_true', help='debug logging')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    try:
        capture = load_vcd(args.capture, args.sample_period)
        waveforms = {}
        for channel, signal in (('MDC', args.mdc), ('MDIO', args.mdio)):
            if signal in capture.channels:
                waveforms[channel] = capture.channels[signal]
        events = Decoder().process(waveforms, {}, capture.sample_period)
    except (OSError, MdioDecodeError) as e:
        print(f"mdio-decode: {e}", file=sys.stderr)
        return 1

    for ev in events:
        print(f"{ev.start_sample}-{ev.end_sample} {ev.category.name.lower()} {ev.label}")
    return 0

if __name__ == '__main__':
    sys.exit(main())

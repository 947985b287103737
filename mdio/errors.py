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
Error taxonomy of the MDIO decoder.

Only ChannelError, VcdError and the ConfigurationError raised for a missing
sample period ever reach the caller. The others are either turned into a
single diagnostic annotation (preflight errors), recorded next to the decoded
fields (IndexRangeError) or swallowed by the frame scanner (FrameSyncFailure).
'''

class MdioDecodeError(Exception):
    pass

class PreflightError(MdioDecodeError):
    '''Capture cannot be decoded reliably; reported as one diagnostic span.'''

    label = ''
    # Span of the diagnostic annotation, in tenths of the buffer length.
    span = (0, 10)

class ConfigurationError(PreflightError):
    label = 'sample period too large'
    span = (4, 7)

class InsufficientDataError(PreflightError):
    label = 'Viewport fast decode not supported'
    span = (1, 9)

class FrameSyncFailure(MdioDecodeError):
    '''A candidate frame start turned out not to be one.'''

    def __init__(self, start_index, bitcount, reason):
        super().__init__('frame at sample %d dropped after %d bits: %s'
                         % (start_index, bitcount, reason))
        self.start_index = start_index
        self.bitcount = bitcount
        self.reason = reason

class IndexRangeError(MdioDecodeError):
    def __init__(self, start_idx, end_idx, length):
        super().__init__('invalid bit range [%d, %d] for %d bits'
                         % (start_idx, end_idx, length))
        self.start_idx = start_idx
        self.end_idx = end_idx
        self.length = length

class ChannelError(MdioDecodeError, ValueError):
    pass

class VcdError(MdioDecodeError, ValueError):
    pass

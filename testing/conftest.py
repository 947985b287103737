import pytest

from captures import SAMPLE_PERIOD
from mdio.timing import timing_parameters

@pytest.fixture
def timing():
    return timing_parameters(SAMPLE_PERIOD)

@pytest.fixture
def span(timing):
    """Sample span of bits first_bit..last_bit, as the decoder reports it"""
    def span(edges, first_bit, last_bit):
        return edges[first_bit], edges[last_bit] + timing.bit_sample_length
    return span

import logging

import pytest

from captures import build_capture, frame_bits, read_frame, write_frame
from mdio.errors import IndexRangeError
from mdio.frame import (Category, FrameAttempt, Phase, bit_string,
                        decode_unsigned, opcode_label, rising_edges)
from mdio.pd import DecodeResult

def test_rising_edges():
    mdc = [False, True, True, False, True, False, False, True]
    assert list(rising_edges(mdc)) == [1, 4, 7]
    assert list(rising_edges(mdc, 2)) == [4, 7]
    assert list(rising_edges(mdc, 4)) == [4, 7]
    # Index 0 has no predecessor and is never an edge.
    assert list(rising_edges([True, True, False], 0)) == []

def test_rising_edges_restartable():
    mdc = [False, True] * 4
    edges = rising_edges(mdc)
    assert next(edges) == 1
    assert list(rising_edges(mdc, 3)) == [3, 5, 7]
    assert list(edges) == [3, 5, 7]

def test_decode_unsigned():
    bits = [False, False, False, True, True, True, False, True]
    assert decode_unsigned(bits, 0, 4) == 3
    assert decode_unsigned(bits, 3, 7) == 0b11101
    assert decode_unsigned(bits, 7, 7) == 1

@pytest.mark.parametrize('start_idx, end_idx', [(5, 2), (-1, 3), (0, 8)])
def test_decode_unsigned_bad_range(start_idx, end_idx, caplog):
    bits = [True] * 8
    errors = []
    with caplog.at_level(logging.WARNING, logger='mdio.frame'):
        assert decode_unsigned(bits, start_idx, end_idx, errors) == 0
    assert len(errors) == 1
    assert isinstance(errors[0], IndexRangeError)
    assert errors[0].length == 8
    assert 'invalid bit range' in caplog.text

def test_decode_unsigned_bad_range_without_error_list():
    assert decode_unsigned([True, True], 1, 0) == 0

def test_bit_string():
    assert bit_string([True, False, True, True], 1, 3) == '011'

@pytest.mark.parametrize('bits, expected', [
    ((True, False), ('R', True)),
    ((False, True), ('W', False)),
    ((True, True), ('11', False)),
    ((False, False), ('00', False)),
])
def test_opcode_label(bits, expected):
    assert opcode_label(*bits) == expected

def test_write_frame_attempt(timing):
    waveforms, edges = build_capture(write_frame())
    result = DecodeResult()
    attempt = FrameAttempt(waveforms['MDC'], waveforms['MDIO'], timing, result)
    assert attempt.run(edges[0])
    assert attempt.phase is Phase.DONE
    assert attempt.is_read is False
    assert attempt.bit_indices == edges
    assert attempt.bit_values == write_frame()
    assert [ev.category for ev in result] == [
        Category.STRUCTURAL, Category.STRUCTURAL, Category.OPCODE,
        Category.ADDRESS, Category.ADDRESS, Category.TURNAROUND, Category.DATA]

def test_read_frame_samples_late_after_bit_46(timing):
    bits = read_frame()
    waveforms, edges = build_capture(bits, slave_from=46)
    attempt = FrameAttempt(waveforms['MDC'], waveforms['MDIO'], timing,
                           DecodeResult())
    assert attempt.run(edges[0])
    assert attempt.is_read is True
    # Completes one bit early: bit 63 is never captured.
    assert attempt.bitcount == 63
    assert attempt.bit_values == bits[:63]
    assert attempt.bit_indices == edges[:63]

def test_attempt_drops_broken_preamble(timing):
    bits = write_frame()
    bits[5] = False
    waveforms, edges = build_capture(bits)
    result = DecodeResult()
    attempt = FrameAttempt(waveforms['MDC'], waveforms['MDIO'], timing, result)
    assert not attempt.run(edges[0])
    assert attempt.phase is Phase.PREAMBLE
    assert attempt.bitcount == 6
    assert result == []

def test_attempt_drops_bad_start_bits(timing):
    bits = frame_bits('01', 3, 7, '10' + '0' * 16)
    bits[32] = True
    waveforms, edges = build_capture(bits)
    result = DecodeResult()
    attempt = FrameAttempt(waveforms['MDC'], waveforms['MDIO'], timing, result)
    assert not attempt.run(edges[0])
    assert attempt.bitcount == 34
    assert result == []

def test_attempt_rejects_low_start(timing):
    waveforms, edges = build_capture(write_frame())
    attempt = FrameAttempt(waveforms['MDC'], waveforms['MDIO'], timing,
                           DecodeResult())
    # Bit 32 is the first start bit, a zero.
    assert not attempt.run(edges[32])
    assert attempt.phase is Phase.SEEK_START

def test_attempt_runs_out_of_edges(timing):
    waveforms, edges = build_capture(write_frame()[:40])
    result = DecodeResult()
    attempt = FrameAttempt(waveforms['MDC'], waveforms['MDIO'], timing, result)
    assert not attempt.run(edges[0])
    assert attempt.phase is Phase.PHY_ADDR
    assert [ev.label for ev in result] == ['PREAMBLE', 'S', 'W']

def test_attempt_is_reusable(timing):
    waveforms, edges = build_capture(write_frame())
    result = DecodeResult()
    attempt = FrameAttempt(waveforms['MDC'], waveforms['MDIO'], timing, result)
    assert not attempt.run(edges[1])
    assert attempt.run(edges[0])
    assert len(result) == 7

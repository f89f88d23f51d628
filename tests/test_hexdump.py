"""Tests for the hex dump formatter."""

import math

import pytest

from packet_logger.pipeline.hexdump import BYTES_PER_LINE, iter_lines, render


class TestRender:
    """Line layout of render()."""

    def test_empty_payload_renders_nothing(self):
        assert render(b"") == ""

    def test_one_full_line(self):
        assert render(bytes(range(16))) == (
            "0000: 00 01 02 03 04 05 06 07 08 09 0A 0B 0C 0D 0E 0F\n"
        )

    def test_partial_last_line_has_no_padding(self):
        out = render(bytes(range(18)))
        assert out.splitlines() == [
            "0000: 00 01 02 03 04 05 06 07 08 09 0A 0B 0C 0D 0E 0F",
            "0010: 10 11",
        ]

    def test_uppercase_hex(self):
        assert render(b"\xab\xff") == "0000: AB FF\n"

    def test_offsets_past_four_digits_keep_growing(self):
        payload = bytes(0x10010)
        last = render(payload).splitlines()[-1]
        assert last.startswith("10000: ")

    @pytest.mark.parametrize("size", [1, 15, 16, 17, 31, 32, 33, 100])
    def test_line_count_and_byte_total(self, size):
        """ceil(len/16) lines, at most 16 bytes each, all bytes accounted for."""
        lines = render(bytes(size)).splitlines()
        assert len(lines) == math.ceil(size / BYTES_PER_LINE)
        counts = [len(line.split(": ", 1)[1].split()) for line in lines]
        assert all(c <= BYTES_PER_LINE for c in counts)
        assert sum(counts) == size


class TestIterLines:
    def test_offsets_step_by_sixteen(self):
        offsets = [off for off, _ in iter_lines(bytes(40))]
        assert offsets == [0, 16, 32]

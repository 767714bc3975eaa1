"""
Command line tests for synvm.py.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging

import pytest

from synacor_vm.config import DEFAULT_TRACE_LOGGER
from synacor_vm.mem.loader import words_to_bytes
from synvm import EXIT_HALT, EXIT_LIMIT, EXIT_SETUP, EXIT_TRAP, main

R0 = 32768


@pytest.fixture
def image(tmp_path):
    """Write a word list to an image file, return its path as str."""
    def _write(words, name="prog.bin"):
        path = tmp_path / name
        path.write_bytes(words_to_bytes(words))
        return str(path)
    return _write


@pytest.fixture
def trace_logger():
    """Restore the trace logger after main() attaches a file handler."""
    logger = logging.getLogger(DEFAULT_TRACE_LOGGER)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


class TestMain:
    def test_halt(self, image, capsysbinary):
        path = image([19, 104, 19, 105, 0])
        assert main([path]) == EXIT_HALT
        assert capsysbinary.readouterr().out == b'hi'

    def test_scripted_input(self, image, tmp_path, capsysbinary):
        script = tmp_path / "script.txt"
        script.write_bytes(b'q')
        path = image([20, R0, 19, R0, 0])
        assert main([path, '--input', str(script)]) == EXIT_HALT
        assert capsysbinary.readouterr().out == b'q'

    def test_trap(self, image):
        path = image([3, R0])
        assert main([path]) == EXIT_TRAP

    def test_step_limit(self, image):
        path = image([6, 0])
        assert main([path, '--max-steps', '100']) == EXIT_LIMIT

    def test_missing_image(self, tmp_path):
        assert main([str(tmp_path / "missing.bin")]) == EXIT_SETUP

    def test_odd_image(self, tmp_path):
        path = tmp_path / "odd.bin"
        path.write_bytes(b'\x00\x00\x13')
        assert main([str(path)]) == EXIT_SETUP

    def test_memory_padded_by_default(self, image):
        """The image is 4 words but may write anywhere in 15-bit space."""
        path = image([16, 30000, 1, 0])
        assert main([path]) == EXIT_HALT

    def test_memory_size_option(self, image):
        path = image([16, 30000, 1, 0])
        assert main([path, '--memory-size', '0x10']) == EXIT_TRAP

    def test_disassemble(self, image, capsys):
        path = image([9, R0, 4, 4, 0])
        assert main([path, '--disassemble']) == EXIT_HALT
        out = capsys.readouterr().out
        assert "ADD  r0, 4, 4" in out
        assert "HALT" in out

    def test_trace_file(self, image, tmp_path, trace_logger):
        trace = tmp_path / "info.log"
        path = image([21, 0])
        assert main([path, '--trace', str(trace)]) == EXIT_HALT
        for handler in trace_logger.handlers:
            handler.flush()
        lines = trace.read_text().splitlines()
        assert len(lines) == 2
        assert "NOOP" in lines[0]
        assert "HALT" in lines[1]

"""
Unit tests for the emit phase
"""

import os
import pytest
from unittest.mock import patch

from reduce_worker.config import ReduceSettings
from reduce_worker.emitter import emit
from reduce_worker.errors import OutputUnavailableError, EncodeError, ReduceFunctionError


def concat(key, values):
    return '+'.join(values)


class TestEmitOutput:
    """Tests for output generation"""

    def test_writes_one_record_per_key(self, temp_dir, read_output):
        out_file = os.path.join(temp_dir, 'out')
        stats = emit({'b': ['1'], 'a': ['2', '3']}, out_file, concat)

        assert read_output(out_file) == [('a', '2+3'), ('b', '1')]
        assert stats.records_written == 2
        assert stats.keys_total == 2

    def test_reduce_called_once_per_key_with_all_values(self, temp_dir):
        calls = []

        def recording_reduce(key, values):
            calls.append((key, list(values)))
            return str(len(values))

        emit({'x': ['1', '2'], 'y': ['3']}, os.path.join(temp_dir, 'out'), recording_reduce)

        assert sorted(calls) == [('x', ['1', '2']), ('y', ['3'])]

    def test_unsorted_keeps_first_seen_order(self, temp_dir, read_output):
        out_file = os.path.join(temp_dir, 'out')
        emit({'z': ['1'], 'a': ['2']}, out_file, concat, ReduceSettings(sort_keys=False))

        assert [k for k, _ in read_output(out_file)] == ['z', 'a']

    def test_replaces_existing_output(self, temp_dir, read_output):
        out_file = os.path.join(temp_dir, 'out')
        with open(out_file, 'w') as f:
            f.write('stale data that is much longer than the new output\n' * 10)

        emit({'a': ['1']}, out_file, concat)

        assert read_output(out_file) == [('a', '1')]

    def test_empty_table_creates_empty_file(self, temp_dir):
        out_file = os.path.join(temp_dir, 'out')
        stats = emit({}, out_file, concat)

        assert os.path.getsize(out_file) == 0
        assert stats.records_written == 0


class TestEmitErrors:
    """Tests for output error handling"""

    def test_unopenable_output_is_fatal(self, temp_dir):
        out_file = os.path.join(temp_dir, 'no', 'such', 'dir', 'out')

        with pytest.raises(OutputUnavailableError) as exc_info:
            emit({'a': ['1']}, out_file, concat)

        assert exc_info.value.path == out_file
        assert not os.path.exists(out_file)

    def test_output_path_is_directory(self, temp_dir):
        with pytest.raises(OutputUnavailableError):
            emit({'a': ['1']}, temp_dir, concat)

    def test_unencodable_result_is_skipped(self, temp_dir, read_output):
        out_file = os.path.join(temp_dir, 'out')

        def sometimes_int(key, values):
            return 42 if key == 'bad' else 'ok'

        stats = emit({'a': ['1'], 'bad': ['1'], 'c': ['1']}, out_file, sometimes_int)

        assert read_output(out_file) == [('a', 'ok'), ('c', 'ok')]
        assert stats.records_skipped == 1

    def test_unencodable_result_raises_in_strict_mode(self, temp_dir):
        with pytest.raises(EncodeError) as exc_info:
            emit({'a': ['1']}, os.path.join(temp_dir, 'out'), lambda k, vs: None,
                 ReduceSettings(strict=True))
        assert exc_info.value.key == 'a'

    def test_unwritable_text_skips_only_that_key(self, temp_dir, read_output):
        out_file = os.path.join(temp_dir, 'out')
        grouped = {'a': ['1'], 'b': ['\ud800'], 'c': ['3'], 'd': ['4']}

        stats = emit(grouped, out_file, concat)

        assert [k for k, _ in read_output(out_file)] == ['a', 'c', 'd']
        assert stats.records_written == 3
        assert stats.records_skipped == 1
        assert stats.write_failed is False

    def test_unwritable_text_raises_in_strict_mode(self, temp_dir):
        with pytest.raises(EncodeError) as exc_info:
            emit({'b': ['\ud800']}, os.path.join(temp_dir, 'out'), concat,
                 ReduceSettings(strict=True))
        assert exc_info.value.key == 'b'

    def test_reduce_function_error_propagates(self, temp_dir):
        def broken(key, values):
            raise ValueError("Test error")

        with pytest.raises(ReduceFunctionError) as exc_info:
            emit({'a': ['1']}, os.path.join(temp_dir, 'out'), broken)

        assert exc_info.value.key == 'a'
        assert 'Test error' in str(exc_info.value)

    def test_write_failure_stops_emission(self, temp_dir):
        out_file = os.path.join(temp_dir, 'out')
        real_open = open
        written = []

        class BrokenSink:
            def __init__(self, f):
                self.f = f

            def write(self, line):
                if written:
                    raise BrokenPipeError(32, 'Broken pipe')
                written.append(line)
                return self.f.write(line)

            def close(self):
                self.f.close()

        def sink_open(path, *args, **kwargs):
            return BrokenSink(real_open(path, *args, **kwargs))

        calls = []

        def counting_reduce(key, values):
            calls.append(key)
            return 'v'

        with patch('builtins.open', side_effect=sink_open):
            stats = emit({'a': ['1'], 'b': ['1'], 'c': ['1']}, out_file, counting_reduce)

        assert stats.write_failed is True
        assert stats.records_written == 1
        assert calls == ['a', 'b']
        with real_open(out_file) as f:
            assert f.read() == written[0]

    def test_closed_sink_stops_emission(self, temp_dir):
        out_file = os.path.join(temp_dir, 'out')
        real_open = open

        class ClosedSink:
            closed = False

            def __init__(self, f):
                self.f = f

            def write(self, line):
                if self.closed:
                    raise ValueError('I/O operation on closed file.')
                self.closed = True
                return self.f.write(line)

            def close(self):
                self.f.close()

        with patch('builtins.open', side_effect=lambda p, *a, **kw: ClosedSink(real_open(p, *a, **kw))):
            stats = emit({'a': ['1'], 'b': ['1'], 'c': ['1']}, out_file, concat)

        assert stats.write_failed is True
        assert stats.records_written == 1

    def test_flush_failure_on_close_is_reported(self, temp_dir):
        out_file = os.path.join(temp_dir, 'out')
        real_open = open

        class FailingClose:
            def __init__(self, f):
                self.f = f

            def write(self, line):
                return self.f.write(line)

            def close(self):
                self.f.close()
                raise OSError(28, 'No space left on device')

        with patch('builtins.open', side_effect=lambda p, *a, **kw: FailingClose(real_open(p, *a, **kw))):
            stats = emit({'a': ['1']}, out_file, concat)

        assert stats.write_failed is True
        # the line reached the buffer even though the flush failed
        assert stats.records_written == 1

"""
Pytest configuration and shared fixtures
"""

import pytest
import json
import os
import sys
import tempfile
import shutil

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from reduce_worker.naming import reduce_name
from reduce_worker.records import KeyValue, encode_record


@pytest.fixture
def temp_dir():
    """Create temporary directory for test files"""
    dirpath = tempfile.mkdtemp()
    yield dirpath
    shutil.rmtree(dirpath)


@pytest.fixture
def write_intermediate(temp_dir):
    """Write the intermediate file a map task produced for a partition"""
    def _write(job_name, map_task, reduce_task, records, extra_lines=()):
        path = reduce_name(job_name, map_task, reduce_task, temp_dir)
        with open(path, 'w', encoding='utf-8') as f:
            for record in records:
                f.write(encode_record(KeyValue(*record)))
            for line in extra_lines:
                f.write(line + '\n')
        return path
    return _write


@pytest.fixture
def wordcount_job_file():
    """Path to word count example job file"""
    return os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
                        'examples', 'wordcount.py')


@pytest.fixture
def inverted_index_job_file():
    """Path to inverted index example job file"""
    return os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
                        'examples', 'inverted_index.py')


@pytest.fixture
def read_output():
    """Read an output file back as a list of (key, value) tuples"""
    def _read(path):
        with open(path, 'r', encoding='utf-8') as f:
            return [(r['key'], r['value']) for r in map(json.loads, f)]
    return _read

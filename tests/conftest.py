"""
Shared fixtures for reduce task tests.
"""

import pytest

from mrreduce.framework.records import KeyValue
from mrreduce.utils.naming import reduce_name
from mrreduce.worker.intermediate import IntermediateFileManager, decode_records


@pytest.fixture
def work_dir(tmp_path):
    return tmp_path


@pytest.fixture
def write_intermediate(work_dir):
    """Write the intermediate file map_task produced for reduce_task."""
    manager = IntermediateFileManager()

    def write(job_name, map_task, reduce_task, pairs):
        path = work_dir / reduce_name(job_name, map_task, reduce_task)
        manager.write_records(str(path), [KeyValue(k, v) for k, v in pairs])
        return path

    return write


@pytest.fixture
def read_output():
    """Decode an output file into a list of (key, value) tuples."""

    def read(path):
        with open(path, 'r', encoding='utf-8') as f:
            return [tuple(kv) for kv in decode_records(f.read())]

    return read

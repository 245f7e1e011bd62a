import contextlib
import json
import os

from mrreduce.exceptions import InputReadError, OutputWriteError
from mrreduce.framework.records import from_dict, to_dict


_decoder = json.JSONDecoder()
_WHITESPACE = ' \t\r\n'


def encode_records(f, records):
    """Write records to an open text file, one JSON object per line"""
    for kv in records:
        f.write(json.dumps(to_dict(kv)))
        f.write('\n')


def decode_records(text):
    """Decode a stream of JSON records until the text is exhausted

    Records may be separated by any amount of whitespace. A top-level JSON
    array of records is flattened into the stream.

    Raises:
        ValueError: on malformed JSON or a value that is not a record
    """
    records = []
    pos = 0
    end = len(text)

    while True:
        while pos < end and text[pos] in _WHITESPACE:
            pos += 1
        if pos == end:
            return records

        # JSONDecodeError is a ValueError subclass
        obj, pos = _decoder.raw_decode(text, pos)

        if isinstance(obj, list):
            records.extend(from_dict(item) for item in obj)
        else:
            records.append(from_dict(obj))


class IntermediateFileManager:
    """Reads intermediate files and writes reduce output"""

    def __init__(self, base_dir=None):
        self.base_dir = base_dir

    def resolve(self, path):
        """Place a relative path under base_dir, if one is set"""
        if self.base_dir is None or os.path.isabs(path):
            return path
        return os.path.join(self.base_dir, path)

    def read_intermediate_file(self, filepath, map_task=None):
        """Read and decode every record of an intermediate file

        Raises:
            InputReadError: if the file is missing, unreadable or malformed
        """
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise InputReadError(
                f"Cannot read intermediate file {filepath}: {e}",
                path=filepath, map_task=map_task
            ) from e

        try:
            return decode_records(text)
        except ValueError as e:
            raise InputReadError(
                f"Malformed intermediate file {filepath}: {e}",
                path=filepath, map_task=map_task
            ) from e

    def write_records(self, filepath, records):
        """Encode records to filepath, truncating any previous contents"""
        with open(filepath, 'w', encoding='utf-8') as f:
            encode_records(f, records)

    def write_output_file(self, filepath, records, atomic=True):
        """Write the reduce output for one task

        With atomic set, records go to filepath + ".tmp" which is renamed
        onto filepath once closed, so filepath never holds a partial output.

        Raises:
            OutputWriteError: if the file cannot be created, written or closed
        """
        if not atomic:
            try:
                self.write_records(filepath, records)
            except OSError as e:
                raise OutputWriteError(
                    f"Cannot write output file {filepath}: {e}", path=filepath
                ) from e
            return

        # Write to temporary file first
        temp_path = f"{filepath}.tmp"
        try:
            with open(temp_path, 'w', encoding='utf-8') as f:
                encode_records(f, records)
                f.flush()
                os.fsync(f.fileno())

            # Atomic rename
            os.replace(temp_path, filepath)
        except BaseException as e:
            self._discard(temp_path)
            if isinstance(e, OSError):
                raise OutputWriteError(
                    f"Cannot write output file {filepath}: {e}", path=filepath
                ) from e
            raise

    def _discard(self, temp_path):
        """Remove a leftover temporary file; anything else at the path is left alone"""
        if os.path.isfile(temp_path):
            with contextlib.suppress(OSError):
                os.remove(temp_path)

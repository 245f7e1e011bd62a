from concurrent import futures
from datetime import datetime

from mrreduce.framework.reducer import ReducePhase
from mrreduce.framework.shuffler import ShufflePhase
from mrreduce.utils.naming import reduce_name
from mrreduce.worker.intermediate import IntermediateFileManager


class ReduceTaskExecutor:
    """Executes one reduce task.

    Based on Google MapReduce paper:
    - Read the intermediate file each map task wrote for this partition
    - Group values by key (shuffle)
    - Apply the reduce function once per distinct key
    - Write one output record per key

    A task either completes and leaves a full output file, or raises and
    must be run again from scratch.
    """

    def __init__(self, naming=reduce_name, work_dir=None, sort_keys=False,
                 atomic_output=True, read_workers=1, verbose=True):
        """Initialize executor with framework components.

        Args:
            naming: Function (job_name, map_task, reduce_task) -> file name
                    of an intermediate file
            work_dir: Directory that relative file names are resolved in
            sort_keys: Write output records sorted by key
            atomic_output: Write output to a temporary file and rename it
            read_workers: Number of threads reading intermediate files
            verbose: Print progress lines
        """
        if read_workers < 1:
            raise ValueError(f"read_workers must be at least 1, got {read_workers}")

        self.naming = naming
        self.sort_keys = sort_keys
        self.atomic_output = atomic_output
        self.read_workers = read_workers
        self.verbose = verbose

        self.shuffle_phase = ShufflePhase()
        self.intermediate_manager = IntermediateFileManager(base_dir=work_dir)

    def execute(self, job_name, reduce_task, out_file, n_map, reduce_f):
        """Execute a reduce task.

        1. Read the intermediate file of every map task for this partition
        2. Group values by key
        3. Call reduce_f(key, values) once per distinct key
        4. Write KeyValue(key, result) records to out_file

        Args:
            job_name: Name of the MapReduce job
            reduce_task: Index of this reduce task
            out_file: Where to write the output
            n_map: Number of map tasks that produced input
            reduce_f: User-defined reduce function(key, values) -> str

        Returns:
            Number of records written

        Raises:
            InputReadError: an intermediate file is missing or malformed
            OutputWriteError: the output file cannot be written
        """
        if n_map < 0:
            raise ValueError(f"n_map must not be negative, got {n_map}")

        self._log(f"Reduce task {reduce_task} of job {job_name}: "
                  f"reading {n_map} intermediate file(s)")

        records = self._read_intermediate(job_name, reduce_task, n_map)

        grouped_data = self.shuffle_phase.group(records)
        if self.sort_keys:
            grouped_data = self.shuffle_phase.sort_by_key(grouped_data)

        self._log(f"Reduce task {reduce_task}: grouped {len(records)} records "
                  f"into {len(grouped_data)} keys")

        results = ReducePhase(reduce_f).execute(grouped_data)

        out_path = self.intermediate_manager.resolve(out_file)
        self.intermediate_manager.write_output_file(
            out_path, results, atomic=self.atomic_output
        )

        self._log(f"Reduce task {reduce_task}: wrote {len(results)} records to {out_path}")
        return len(results)

    def _read_intermediate(self, job_name, reduce_task, n_map):
        """Read every intermediate file for reduce_task, in map task order."""
        paths = [
            self.intermediate_manager.resolve(self.naming(job_name, m, reduce_task))
            for m in range(n_map)
        ]

        records = []
        if self.read_workers == 1 or n_map <= 1:
            for m, path in enumerate(paths):
                records.extend(self.intermediate_manager.read_intermediate_file(path, map_task=m))
            return records

        with futures.ThreadPoolExecutor(max_workers=self.read_workers) as pool:
            pending = [
                pool.submit(self.intermediate_manager.read_intermediate_file, path, m)
                for m, path in enumerate(paths)
            ]
            try:
                # Consumed in submission order so grouping matches the sequential read
                for future in pending:
                    records.extend(future.result())
            except BaseException:
                for future in pending:
                    future.cancel()
                raise

        return records

    def _log(self, message):
        if self.verbose:
            print(f"[{datetime.now()}] {message}")


def do_reduce(job_name, reduce_task, out_file, n_map, reduce_f):
    """Run one reduce task with the default executor settings."""
    return ReduceTaskExecutor().execute(job_name, reduce_task, out_file, n_map, reduce_f)

"""File naming convention shared by map and reduce tasks.

Map task ``m`` writes the records routed to reduce task ``r`` to
``reduce_name(job, m, r)``; reduce task ``r`` writes its result to
``merge_name(job, r)``, which the merge stage then reads.
"""


def reduce_name(job_name, map_task, reduce_task):
    """Name of the intermediate file from map_task for reduce_task"""
    return f"mrtmp.{job_name}-{map_task}-{reduce_task}"


def merge_name(job_name, reduce_task):
    """Name of the output file of reduce_task"""
    return f"mrtmp.{job_name}-res-{reduce_task}"

import importlib

from mrreduce.framework.records import KeyValue


class ReducePhase:
    """Handles the reduce phase of MapReduce"""

    def __init__(self, reduce_function):
        """
        Args:
            reduce_function: User-defined reduce function(key, values) -> str
        """
        self.reduce_function = reduce_function

    def execute(self, grouped_data):
        """Execute reduce function once per key

        Args:
            grouped_data: Dict of {key: [values]}

        Returns:
            List of KeyValue(key, reduced_value), one per key, in the
            iteration order of grouped_data

        Raises:
            TypeError: if the reduce function returns something other than str
        """
        results = []

        for key, values in grouped_data.items():
            result = self.reduce_function(key, values)
            if not isinstance(result, str):
                raise TypeError(
                    f"Reduce function returned {type(result).__name__} "
                    f"for key {key!r}; expected str"
                )
            results.append(KeyValue(key, result))

        return results


# Example reduce function for word count
def word_count_reduce(word, counts):
    """Reduce function for word count

    Args:
        word: The word
        counts: List of counts as strings

    Returns:
        Total count
    """
    return str(sum(int(c) for c in counts))


def count_reduce(key, values):
    """Number of values seen for key"""
    return str(len(values))


def concat_reduce(key, values):
    """Join values with commas (e.g. documents containing a term)"""
    return ','.join(values)


REDUCE_FUNCTIONS = {
    'word_count': word_count_reduce,
    'count': count_reduce,
    'concat': concat_reduce,
}


def resolve_reduce_function(spec):
    """Find a reduce function from a callable, a registered name, or a
    "package.module:attr" reference.
    """
    if callable(spec):
        return spec

    if spec in REDUCE_FUNCTIONS:
        return REDUCE_FUNCTIONS[spec]

    try:
        module_name, attr_list = spec.split(':')
        func = importlib.import_module(module_name)
        for attr_name in attr_list.split('.'):
            func = getattr(func, attr_name)
    except (ValueError, ImportError, AttributeError):
        raise ValueError(f"Could not find reduce function {spec!r}") from None

    if not callable(func):
        raise ValueError(f"{spec!r} is not callable")
    return func

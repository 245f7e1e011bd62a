from collections import defaultdict


class ShufflePhase:
    """Handles the shuffle phase - grouping intermediate records by key"""

    def group(self, records):
        """Group record values by key in a single pass

        Args:
            records: Iterable of KeyValue records from every map task

        Returns:
            Dict of {key: [value1, value2, ...]}, keys in order of first
            appearance, values in order of appearance
        """
        grouped_data = defaultdict(list)

        for key, value in records:
            grouped_data[key].append(value)

        return dict(grouped_data)

    def sort_by_key(self, grouped_data):
        """Sort grouped data by key

        Args:
            grouped_data: Dict of {key: [values]}

        Returns:
            Dict with the same groups, keys in sorted order
        """
        return dict(sorted(grouped_data.items()))

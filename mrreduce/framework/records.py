from collections import namedtuple


KeyValue = namedtuple('KeyValue', ['key', 'value'])


def to_dict(kv):
    """Encode a KeyValue the way the merge stage expects to read it"""
    return {'Key': kv.key, 'Value': kv.value}


def from_dict(data):
    """Build a KeyValue from a decoded record object

    Raises:
        ValueError: if the object is not a record with string Key and Value
    """
    if not isinstance(data, dict):
        raise ValueError(f"expected a record object, got {type(data).__name__}")

    try:
        key, value = data['Key'], data['Value']
    except KeyError as e:
        raise ValueError(f"record is missing field {e}") from None

    if not isinstance(key, str) or not isinstance(value, str):
        raise ValueError(f"record fields must be strings: {data!r}")

    return KeyValue(key, value)

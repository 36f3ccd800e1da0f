"""
Constants used throughout the Breeze metadata library.
"""

import datetime
import decimal
import uuid

# Python types mapped to the Breeze data type names sent to the client
DATA_TYPE_NAMES = {
    str: "String",
    int: "Int32",
    float: "Double",
    bool: "Boolean",
    decimal.Decimal: "Decimal",
    datetime.datetime: "DateTime",
    datetime.date: "DateTime",
    datetime.time: "Time",
    datetime.timedelta: "Time",
    uuid.UUID: "Guid",
    bytes: "Binary",
}

# Types that cannot hold None unless wrapped in Optional[...]
VALUE_TYPES = frozenset({
    int,
    float,
    bool,
    decimal.Decimal,
    datetime.datetime,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    uuid.UUID,
})

# Iterable types that are treated as scalars, never as collections
SCALAR_ITERABLES = (str, bytes, bytearray)

# Values accepted for autoGeneratedKeyType
AUTO_GENERATED_KEY_TYPES = ("Identity", "KeyGenerator", "None")

LOCAL_QUERY_COMPARISON_OPTIONS = "caseInsensitiveSQL"

ASSOCIATION_PREFIX = "FK_"

CONCURRENCY_MODE_FIXED = "Fixed"

# Suffix dropped from annotation class names to get the annotation kind
ATTRIBUTE_SUFFIX = "Attribute"

# Default file name searched for naming policy overrides
DEFAULT_POLICY_FILE = "breeze_policy.json"

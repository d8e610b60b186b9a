"""
JSON-safe serialization of analytics results.

Inferential statistics can produce NaN or infinite values (an F statistic
for a perfect fit, a p-value for constant input). JSON has no spelling for
those, so they are written as null.
"""

import json
import math
import numbers
from typing import Any

import numpy as np


def clean_nan_values(obj: Any) -> Any:
    """
    Recursively replace NaN and +/-Infinity with None.

    NumPy scalars are converted to plain Python values on the way.

    Examples:
        >>> clean_nan_values({'f_statistic': float('inf'), 'p_value': 0.0})
        {'f_statistic': None, 'p_value': 0.0}

        >>> clean_nan_values([1, np.float64('nan')])
        [1, None]
    """
    if isinstance(obj, dict):
        return {key: clean_nan_values(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [clean_nan_values(item) for item in obj]
    if isinstance(obj, (str, bytes, bool)):
        return obj

    if isinstance(obj, np.generic):
        obj = obj.item()
        if isinstance(obj, bool):
            return obj

    if isinstance(obj, numbers.Real):
        if math.isnan(obj) or math.isinf(obj):
            return None
    return obj


def json_dumps_safe(obj: Any, **kwargs) -> str:
    """
    Serialize to JSON after cleaning NaN/Infinity.

    ``allow_nan`` is forced off so anything that slips through fails loudly.

    Examples:
        >>> json_dumps_safe({'r_squared': float('nan'), 'n': 3})
        '{"r_squared": null, "n": 3}'
    """
    kwargs['allow_nan'] = False
    return json.dumps(clean_nan_values(obj), **kwargs)

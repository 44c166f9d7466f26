"""JSON compatible serialization of values."""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

import numpy as np
import pandas as pd


def jsonify(obj: Any) -> Any:
    """Converts ``obj`` into a value that can be encoded as JSON.

    Dates and times become ISO 8601 strings, numpy scalars become Python
    scalars and decimals become floats. Mappings and sequences are
    converted recursively.
    """
    if isinstance(obj, dict):
        return {k: jsonify(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple, np.ndarray)):
        items = obj.tolist() if isinstance(obj, np.ndarray) else obj
        return [jsonify(item) for item in items]
    elif isinstance(obj, pd.DataFrame):
        return jsonify(obj.replace({pd.NaT: None}).to_dict("records"))
    elif isinstance(obj, pd.Series):
        return jsonify(obj.replace({pd.NaT: None}).tolist())
    elif obj is pd.NaT:
        return None
    elif isinstance(obj, (pd.Timestamp, datetime, date, time)):
        return obj.isoformat()
    elif isinstance(obj, np.generic):
        return obj.item()
    elif isinstance(obj, Decimal):
        return float(obj)
    elif hasattr(obj, "isoformat"):
        # any other date-like object
        return obj.isoformat()
    return obj


def to_records(raw: Any) -> Any:
    """Turns tabular and array-like raw values into plain lists.

    A ``DataFrame`` becomes a list of row records, a ``Series`` or an
    ``ndarray`` a list of its elements. Other values are returned as is.
    """
    if isinstance(raw, pd.DataFrame):
        return raw.replace({pd.NaT: None}).to_dict("records")
    if isinstance(raw, pd.Series):
        return raw.replace({pd.NaT: None}).tolist()
    if isinstance(raw, np.ndarray):
        return raw.tolist()
    return raw

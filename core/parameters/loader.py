"""Read line-search parameters from YAML or JSON files."""

import json
import logging

import yaml

from core.parameters.line_search_parameters import LineSearchParameters

logger = logging.getLogger("qc_line_search")

_FLOAT_KEYS = ("ftol", "min_step", "max_step", "decrease_factor")


def load_data(filename):
    """Load a parameter file.

    Expected JSON or YAML format:
    {
        "line_search": {"ftol": 1e-4, "max_line_search": 20, ...}
    }
    A flat mapping without the ``line_search`` key is accepted as well."""
    filename_str = str(filename)
    with open(filename_str, "r") as f:
        if filename_str.endswith((".yaml", ".yml")):
            data = yaml.safe_load(f)
        elif filename_str.endswith(".json"):
            data = json.load(f)
        else:
            logger.error(f"Unsupported file format for: {filename_str}")
            raise ValueError(f"Unsupported file format for: {filename_str}")

    return data or {}


def parse_parameters(data: dict) -> LineSearchParameters:
    if not isinstance(data, dict):
        raise ValueError(f"Parameter file must hold a mapping; got {type(data).__name__}")
    section = data.get("line_search", data)
    if not isinstance(section, dict):
        raise ValueError("'line_search' must be a mapping")
    params = LineSearchParameters(section)

    # PyYAML reads "1e-4" (no dot) as a string.
    for key in _FLOAT_KEYS:
        val = params.get(key)
        if isinstance(val, str):
            try:
                params.set(key, float(val))
            except ValueError:
                logger.warning("line_search.%s should be numeric; got %r", key, val)

    return params


def load_parameters(filename) -> LineSearchParameters:
    """Return validated ``LineSearchParameters`` read from ``filename``."""
    params = parse_parameters(load_data(filename))
    logger.debug("Loaded line-search parameters from %s: %s", filename, params)
    return params.validate()

# line_search_parameters.py
from __future__ import annotations

from enum import Enum

import numpy as np

from core.exceptions import InvalidParameterError


class LineSearchTermination(Enum):
    """Acceptance criterion applied to a feasible trial step."""

    NONE = 0
    DECREASE = 1
    ARMIJO = 2

    @classmethod
    def coerce(cls, value):
        """Map a member, a name (any case) or an integer code to a member.

        Returns ``value`` unchanged when it cannot be interpreted, so an
        unknown mode reaches the termination policy and is reported there.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                return value
        if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
            try:
                return cls(int(value))
            except ValueError:
                return value
        return value


class LineSearchParameters:
    def __init__(self, initial_params=None):
        """
        all parameters are defined with underscore, _, instead of spaces
        """
        self._params = {
            # Armijo sufficient-decrease constant, 0 < ftol < 1.
            "ftol": 1e-4,
            # Iteration budget; at most max_line_search + 1 trials are built.
            "max_line_search": 20,
            "min_step": 1e-20,
            "max_step": 1e20,
            # Acceptance criterion:
            #   "none"     – accept the first feasible trial with finite energy.
            #   "decrease" – accept any trial that does not increase the energy.
            #   "armijo"   – require sufficient decrease.
            "line_search_termination": "armijo",
            # Reject trials whose lifted embedding folds over itself.
            "check_self_intersections": True,
            # Multiplier applied to the step after every rejected trial.
            "decrease_factor": 0.5,
            "real_dtype": "float64",
            "index_dtype": "int64",
        }
        if initial_params:
            self.update(initial_params)

    def __getattr__(self, name):
        params = self.__dict__.get("_params")
        if params is not None and name in params:
            return params[name]
        raise AttributeError(
            f"{type(self).__name__!s} object has no attribute {name!r}"
        )

    def __setattr__(self, name, value):
        if name == "_params":
            object.__setattr__(self, name, value)
            return
        params = self.__dict__.get("_params")
        if params is not None and name in params:
            params[name] = value
            return
        object.__setattr__(self, name, value)

    def get(self, key, default=None):
        """Retrieve a parameter value, or return a default if not found."""
        return self._params.get(key, default)

    def set(self, key, value):
        """Set or update a parameter."""
        self._params[key] = value

    def update(self, params):
        """Update multiple parameters at once."""
        self._params.update(params)

    def __contains__(self, key):
        return key in self._params

    def __repr__(self):
        return f"LineSearchParameters({self._params})"

    def to_dict(self):
        """Convert the parameters to a dictionary for serialization."""
        return self._params

    @property
    def termination(self):
        """The termination mode as a ``LineSearchTermination`` when recognized."""
        return LineSearchTermination.coerce(self._params["line_search_termination"])

    @property
    def real_type(self) -> np.dtype:
        return np.dtype(self._params["real_dtype"])

    @property
    def complex_type(self) -> np.dtype:
        return np.result_type(self.real_type, np.complex64)

    @property
    def index_type(self) -> np.dtype:
        return np.dtype(self._params["index_dtype"])

    def _float(self, key: str) -> float:
        value = self._params[key]
        try:
            return float(value)
        except (TypeError, ValueError) as exc:
            raise InvalidParameterError(key, value) from exc

    def validate(self) -> "LineSearchParameters":
        """Check numeric ranges; raise ``InvalidParameterError`` on violation."""
        ftol = self._float("ftol")
        if not 0.0 < ftol < 1.0:
            raise InvalidParameterError("ftol", self.ftol, "'ftol' must lie in (0, 1).")

        max_ls = self.max_line_search
        if (
            isinstance(max_ls, bool)
            or not isinstance(max_ls, (int, np.integer))
            or max_ls < 0
        ):
            raise InvalidParameterError(
                "max_line_search",
                max_ls,
                "'max_line_search' must be a non-negative integer.",
            )

        min_step = self._float("min_step")
        max_step = self._float("max_step")
        if not min_step > 0.0:
            raise InvalidParameterError(
                "min_step", self.min_step, "'min_step' must be positive."
            )
        if max_step < min_step:
            raise InvalidParameterError(
                "max_step",
                self.max_step,
                f"'max_step' ({max_step:g}) must not be below 'min_step' ({min_step:g}).",
            )

        dec = self._float("decrease_factor")
        if not 0.0 < dec < 1.0:
            raise InvalidParameterError(
                "decrease_factor",
                self.decrease_factor,
                "'decrease_factor' must lie in (0, 1).",
            )

        for key, kind in (("real_dtype", "f"), ("index_dtype", "i")):
            try:
                dtype = np.dtype(self._params[key])
            except TypeError as exc:
                raise InvalidParameterError(key, self._params[key]) from exc
            if dtype.kind != kind:
                raise InvalidParameterError(key, self._params[key])

        return self

"""Configuration for the STL decomposition.

Defaults follow the recommendations of Cleveland et al. (1990) where the
paper gives one.
"""

from __future__ import annotations

from smoothkit.exceptions import InvalidInputError
from smoothkit.utils.numerics import next_odd
from smoothkit.utils.validate import validate_int, validate_positive


class STLConfig:
    """Smoothing parameters and loop controls for :func:`smoothkit.stl`.

    Arguments left as ``None`` are derived from ``period`` and ``ns`` when
    the config is built, so a config always holds concrete values.
    """

    def __init__(
        self,
        period: int,
        robust: bool = True,
        nl: int | None = None,
        ns: int = 7,
        nt: int | None = None,
        ni: int | None = None,
        no: int = 0,
        post_smooth: bool = True,
        post_q: int | None = None,
        threshold: float = 0.01,
        verbose: bool = False,
        max_outer: int = 100,
        n_workers: int = 1,
    ):
        """Initialize configuration.

        Args:
            period:
                Number of observations per seasonal cycle (>= 2).

            robust:
                If True, the outer loop runs until both the seasonal and
                the trend iterates converge (bounded by ``max_outer``).
                If False, exactly ``no + 1`` outer passes are made.

            nl:
                Bandwidth of the low-pass filter loess. Defaults to the
                smallest odd integer ``>= period``.

            ns:
                Bandwidth of the cycle-subseries loess. Should be chosen
                from knowledge of the series and diagnostics; must be odd
                and at least 7.

            nt:
                Bandwidth of the trend loess. Defaults to
                ``next_odd(1.5 * period / (1 - 1.5 / ns))``.

            ni:
                Number of inner loop passes per outer pass. Defaults to 1
                when ``robust`` else 2.

            no:
                Outer passes after which robustness weights stop being
                updated. The paper suggests 5 (safe) or 10 (near certain
                convergence) when robustness is needed.

            post_smooth:
                Whether to smooth the final seasonal component with a
                quadratic loess.

            post_q:
                Bandwidth of the seasonal post-smoothing. Defaults to
                ``max(period // 7, 2)``, which approximates the paper's
                ``q = 51`` for ``period = 365``.

            threshold:
                Convergence threshold applied to the seasonal and trend
                convergence ratios.

            verbose:
                If True, per-iteration convergence ratios are logged at
                ``INFO`` instead of ``DEBUG``.

            max_outer:
                Hard cap on the number of outer passes. Robust mode stops
                here even without convergence.

            n_workers:
                Threads used for the independent cycle-subseries fits.

        Raises:
            InvalidInputError: If any value is out of range.
        """
        self.period = validate_int(period, "period", minimum=2)
        self.robust = bool(robust)
        self.ns = validate_int(ns, "ns", minimum=7)
        if self.ns % 2 == 0:
            raise InvalidInputError(
                f"ns must be odd and at least 7 but is {self.ns}; choose it from knowledge "
                "of the series and diagnostic methods."
            )

        self.nl = validate_int(
            next_odd(self.period) if nl is None else nl, "nl", minimum=1
        )
        self.nt = validate_int(
            next_odd(1.5 * self.period / (1.0 - 1.5 / self.ns)) if nt is None else nt,
            "nt",
            minimum=1,
        )
        self.ni = validate_int(
            (1 if self.robust else 2) if ni is None else ni, "ni", minimum=1
        )
        self.no = validate_int(no, "no", minimum=0)
        self.post_smooth = bool(post_smooth)
        self.post_q = validate_int(
            max(self.period // 7, 2) if post_q is None else post_q, "post_q", minimum=1
        )
        self.threshold = validate_positive(threshold, "threshold")
        self.verbose = bool(verbose)
        self.max_outer = validate_int(max_outer, "max_outer", minimum=1)
        self.n_workers = validate_int(n_workers, "n_workers", minimum=1)

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({fields})"

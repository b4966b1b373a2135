"""Contains the name for the logger of smoothkit modules.

``smoothkit`` uses a simple logging system based on the
`Logging <https://docs.python.org/3/library/logging.html>`__ standard library.
Logging messages are grouped in different levels:

* ``DEBUG``: Per-iteration progress of the STL loop.
* ``INFO``: An indication that things are working as expected, e.g. that
    an STL decomposition converged. Per-iteration progress is promoted to
    this level when ``stl(..., verbose=True)`` is used.
* ``WARNING``: An indication that something unexpected
    happened which may require attention.

By default, only messages of level ``WARNING`` are displayed.

Calling applications can configure the format and log level of the displayed messages
by `Configuring Logging <https://docs.python.org/3/howto/logging.html#configuring-logging>`__
for ``smoothkit.logger.smoothkit_logger``, e.g.::

    >>> import logging
    >>> logging.basicConfig(
    ...     level=logging.INFO,
    ...     format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    ... )
"""
import logging

logger_name = "smoothkit"
smoothkit_logger = logging.getLogger(logger_name)

#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Runs a function over a list of items on a thread pool, collecting in order.

## Overview

`OrderedRunner` fans the queries for each subscription, or for each VNET, out
to a pool of worker threads. Results are handed back to the caller through a
`collect` callback that is always invoked by the main thread, one item at a
time, and in the same order as the items were given. Output produced while
collecting is therefore identical no matter how many threads are used, and
`collect` may safely mutate state without locks:

    rows = []

    def collect(sub_id, get_result):
        try:
            rows.extend(get_result())
        except Exception as e:
            print(f"{sub_id}: error: {e}")

    OrderedRunner(max_workers=4).run(query_subscription, sub_ids, collect)

`get_result` is a callable that returns the value returned by the worker or
re-raises the exception the worker raised. A failing item never stops the
processing of the other items.
"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor

LOG = logging.getLogger(__name__)


class OrderedRunner:
    """Executes a function concurrently over items and collects sequentially.

    By default, the number of workers is 10 unless `max_workers` has been
    specified. With `max_workers=1` items are processed strictly one after the
    other.
    """

    def __init__(self, max_workers=10):
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1: {max_workers}")
        self.max_workers = max_workers

    def run(self, func, items, collect):
        """Invoke `func(item)` for every item and pass each result to `collect`.

        This method blocks until all items have been processed and returns the
        number of seconds it took. `collect(item, get_result)` is called on the
        main thread in the order of `items`, waiting for an item's result if
        it is not ready yet, even when later items have already finished.
        """
        start = time.time()
        items = list(items)

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            # Exceptions are captured in the worker and re-raised when the
            # collector calls get_result, so one bad item can't abort the rest.
            futures = [pool.submit(_wrap_result, func, item) for item in items]

            for item, future in zip(items, futures):
                collect(item, future.result())

        elapsed = time.time() - start
        LOG.debug("processed %d item(s) in %.2fs", len(items), elapsed)
        return elapsed


def _wrap_result(fn, *args, **kwargs):
    """Returns a function that encapsulates the result of `fn(*args, **kwargs)`.

    When invoked, the returned function returns the original result or raises
    the exception that the computation raised:

        >>> result = _wrap_result(int, "10")
        >>> result()
        10

        >>> result = _wrap_result(int, "ten")
        >>> result()
        Traceback (most recent call last):
          ...
        ValueError: invalid literal for int() with base 10: 'ten'
    """
    try:
        result = fn(*args, **kwargs)
        return lambda: result
    except Exception as e:  # pylint: disable=broad-except
        return _wrap_exception(e)


def _wrap_exception(exception):
    """Returns a function that when invoked will raise `exception`."""

    def fn():
        raise exception

    return fn

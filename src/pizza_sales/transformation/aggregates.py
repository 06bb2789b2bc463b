"""
Reusable relational primitives behind the sales metrics.
"""
import logging
import numpy as np

from pizza_sales.exceptions import EmptyInputError

logger = logging.getLogger(__name__)

def group_aggregate(frame, by, aggregations, sort_by=None, ascending=True):
    """
    Group rows by key and reduce each group with named aggregations.

    Args:
        frame (DataFrame): Input rows
        by (str or list): Grouping column(s)
        aggregations (dict): Output column -> (input column, function)
        sort_by (list): Columns to order the result by, defaults to the keys
        ascending (bool or list): Sort direction per sort column

    Returns:
        DataFrame: One row per key with the aggregated columns
    """
    keys = [by] if isinstance(by, str) else list(by)

    grouped = frame.groupby(keys, as_index=False, sort=True).agg(**aggregations)

    if sort_by is None:
        sort_by = keys

    # Stable sort keeps ties in key order
    return grouped.sort_values(sort_by, ascending=ascending, kind='mergesort').reset_index(drop=True)

def running_total(frame, order_by, value, output):
    """
    Scan rows in ascending order of order_by accumulating value into output.
    """
    ordered = frame.sort_values(order_by, kind='mergesort').reset_index(drop=True)
    ordered[output] = ordered[value].cumsum()
    return ordered

def rank_within_group(frame, partition_by, order_by, ascending, output='rank'):
    """
    Assign a 1-based ordinal rank inside each partition.

    Rows are ordered by order_by within each partition; equal values still
    get distinct ranks (row number semantics), so order_by should end with
    a unique tie-break column. A partition_by of None ranks the whole frame.
    """
    order_by = [order_by] if isinstance(order_by, str) else list(order_by)
    ascending = [ascending] * len(order_by) if isinstance(ascending, bool) else list(ascending)

    if partition_by is None:
        ordered = frame.sort_values(order_by, ascending=ascending, kind='mergesort').reset_index(drop=True)
        ordered[output] = np.arange(1, len(ordered) + 1, dtype='int64')
        return ordered

    partitions = [partition_by] if isinstance(partition_by, str) else list(partition_by)
    ordered = frame.sort_values(
        partitions + order_by,
        ascending=[True] * len(partitions) + ascending,
        kind='mergesort'
    ).reset_index(drop=True)
    ordered[output] = ordered.groupby(partitions, sort=False).cumcount().astype('int64') + 1
    return ordered

def top_n(frame, n, order_by, ascending, partition_by=None, keep_rank=False):
    """
    Keep the first n rows of each partition after ranking.
    """
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")

    ranked = rank_within_group(frame, partition_by, order_by, ascending)
    ranked = ranked[ranked['rank'] <= n].reset_index(drop=True)

    if not keep_rank:
        ranked = ranked.drop(columns='rank')
    return ranked

def pick_extremum(frame, order_by, ascending, operation, table):
    """
    Return the single first row after ordering.

    Raises EmptyInputError when there is nothing to pick from.
    """
    if len(frame) == 0:
        raise EmptyInputError("No rows to pick from", operation=operation, table=table)

    return top_n(frame, 1, order_by, ascending)

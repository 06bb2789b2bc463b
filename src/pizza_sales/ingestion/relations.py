"""
Immutable snapshot of the four source relations.
"""
import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from pizza_sales.exceptions import MalformedRowError

logger = logging.getLogger(__name__)

# Expected columns for each relation
SCHEMAS = {
    'pizza_types': ['pizza_type_id', 'name', 'category', 'ingredients'],
    'pizzas': ['pizza_id', 'pizza_type_id', 'size', 'price'],
    'orders': ['order_id', 'date', 'time'],
    'order_details': ['order_details_id', 'order_id', 'pizza_id', 'quantity'],
}

PRIMARY_KEYS = {
    'pizza_types': 'pizza_type_id',
    'pizzas': 'pizza_id',
    'orders': 'order_id',
    'order_details': 'order_details_id',
}

FOREIGN_KEYS = [
    {'table': 'pizzas', 'key': 'pizza_type_id', 'ref_table': 'pizza_types', 'ref_key': 'pizza_type_id'},
    {'table': 'order_details', 'key': 'order_id', 'ref_table': 'orders', 'ref_key': 'order_id'},
    {'table': 'order_details', 'key': 'pizza_id', 'ref_table': 'pizzas', 'ref_key': 'pizza_id'},
]


@dataclass(frozen=True, eq=False)
class Relations:
    """The four relations loaded for one analysis session."""

    pizza_types: pd.DataFrame
    pizzas: pd.DataFrame
    orders: pd.DataFrame
    order_details: pd.DataFrame

    @classmethod
    def from_frames(cls, pizza_types, pizzas, orders, order_details, validate=True):
        """
        Build a snapshot from raw DataFrames.

        Inputs are copied and their columns coerced to the expected types.
        Rows that cannot be coerced raise MalformedRowError. When validate is
        True the snapshot also goes through the strict quality gate.
        """
        relations = cls(
            pizza_types=_normalize_pizza_types(pizza_types),
            pizzas=_normalize_pizzas(pizzas),
            orders=_normalize_orders(orders),
            order_details=_normalize_order_details(order_details),
        )

        if validate:
            # Imported here to keep ingestion importable on its own
            from pizza_sales.transformation.quality import validate_relations
            validate_relations(relations)

        logger.info(
            "Loaded relations: "
            + ", ".join(f"{name}={len(df)} rows" for name, df in relations.as_dict().items())
        )
        return relations

    def as_dict(self):
        return {
            'pizza_types': self.pizza_types,
            'pizzas': self.pizzas,
            'orders': self.orders,
            'order_details': self.order_details,
        }


def _prepare(frame, table):
    """Copy a frame, strip column names and check the schema is present."""
    frame = frame.rename(columns=lambda x: x.strip() if isinstance(x, str) else x)

    missing = [col for col in SCHEMAS[table] if col not in frame.columns]
    if missing:
        raise MalformedRowError(
            f"Missing columns {missing}", operation='load', table=table
        )

    return frame[SCHEMAS[table]].reset_index(drop=True).copy()


def _coerce(frame, table, column, converted):
    """Replace a column with its converted values, failing on the first invalid row."""
    invalid = converted.isna() & frame[column].notna()
    if invalid.any():
        bad = frame.loc[invalid].iloc[0]
        raise MalformedRowError(
            f"Invalid value {bad[column]!r} in column '{column}'",
            operation='load',
            table=table,
            key=bad[PRIMARY_KEYS[table]],
        )
    frame[column] = converted


def _coerce_integer(frame, table, column):
    _coerce(frame, table, column, _to_integer(frame[column]))
    # Missing values keep the column as float until the quality gate rejects them
    if frame[column].notna().all():
        frame[column] = frame[column].astype('int64')


def _to_text(series):
    text = series.where(series.isna(), series.astype(str).str.strip())
    return text.replace('', np.nan)


def _to_integer(series):
    numbers = pd.to_numeric(series, errors='coerce').astype(float)
    # Fractional ids and quantities are not integers
    return numbers.where(numbers == numbers.round())


def _to_time_of_day(series):
    offsets = pd.to_timedelta(series.astype(str), errors='coerce')
    in_day = (offsets >= pd.Timedelta(0)) & (offsets < pd.Timedelta(days=1))
    return offsets.where(in_day)


def _normalize_pizza_types(frame):
    frame = _prepare(frame, 'pizza_types')
    for col in ['pizza_type_id', 'name', 'category']:
        frame[col] = _to_text(frame[col])
    return frame


def _normalize_pizzas(frame):
    frame = _prepare(frame, 'pizzas')
    for col in ['pizza_id', 'pizza_type_id', 'size']:
        frame[col] = _to_text(frame[col])
    _coerce(frame, 'pizzas', 'price', pd.to_numeric(frame['price'], errors='coerce').astype(float))
    return frame


def _normalize_orders(frame):
    frame = _prepare(frame, 'orders')
    _coerce_integer(frame, 'orders', 'order_id')
    _coerce(frame, 'orders', 'date', pd.to_datetime(frame['date'], errors='coerce').dt.normalize())
    _coerce(frame, 'orders', 'time', _to_time_of_day(frame['time']))
    return frame


def _normalize_order_details(frame):
    frame = _prepare(frame, 'order_details')
    frame['pizza_id'] = _to_text(frame['pizza_id'])
    for col in ['order_details_id', 'order_id', 'quantity']:
        _coerce_integer(frame, 'order_details', col)
    return frame

"""
Loading relations from CSV files and database tables.
"""
import pandas as pd
import pytest

from pizza_sales.db.engine import create_db_engine, init_db
from pizza_sales.db.models import Base
from pizza_sales.exceptions import MalformedRowError
from pizza_sales.ingestion.loader import (
    load_relations_from_csv,
    load_relations_from_db,
    write_relations_to_db,
)
from pizza_sales.transformation.analytics import SalesAnalytics


def test_load_relations_from_csv(raw_frames, write_csv_dataset, make_config):
    write_csv_dataset(raw_frames)

    relations = load_relations_from_csv(make_config())

    assert len(relations.order_details) == 9
    assert relations.pizza_types.loc[0, 'pizza_type_id'] == 'bbq_ckn'
    assert SalesAnalytics(relations).total_revenue() == 197.0


def test_load_relations_from_csv_missing_file(raw_frames, write_csv_dataset, make_config):
    directory = write_csv_dataset(raw_frames)
    (directory / 'orders.csv').unlink()

    with pytest.raises(FileNotFoundError):
        load_relations_from_csv(make_config())


def test_load_relations_from_csv_rejects_bad_rows(raw_frames, write_csv_dataset, make_config):
    raw_frames['order_details']['quantity'] = raw_frames['order_details']['quantity'].astype(str)
    raw_frames['order_details'].loc[3, 'quantity'] = 'two'
    write_csv_dataset(raw_frames)

    with pytest.raises(MalformedRowError) as excinfo:
        load_relations_from_csv(make_config())

    assert excinfo.value.table == 'order_details'
    assert excinfo.value.key == 4


def test_database_round_trip(relations, make_config):
    engine = create_db_engine(make_config())
    init_db(engine, Base)

    write_relations_to_db(engine, relations)
    loaded = load_relations_from_db(engine)

    assert len(loaded.orders) == 6
    assert loaded.orders['time'].tolist() == relations.orders['time'].tolist()
    assert loaded.orders['date'].tolist() == relations.orders['date'].tolist()

    original = SalesAnalytics(relations).run_all()
    reloaded = SalesAnalytics(loaded).run_all()
    assert reloaded['total_revenue'] == original['total_revenue']
    pd.testing.assert_frame_equal(
        reloaded['top_n_by_revenue_per_category'],
        original['top_n_by_revenue_per_category'],
    )


def test_write_relations_replaces_existing_rows(relations, scenario_relations, make_config):
    engine = create_db_engine(make_config())
    init_db(engine, Base)

    write_relations_to_db(engine, relations)
    write_relations_to_db(engine, scenario_relations)

    loaded = load_relations_from_db(engine)
    assert len(loaded.order_details) == 1
    assert SalesAnalytics(loaded).total_revenue() == 32.0

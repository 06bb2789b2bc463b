"""
Exporting results: CSV files, text report and database tables.
"""
import pandas as pd
from sqlalchemy import create_engine

from pizza_sales.loading.writer import (
    result_to_frame,
    render_text_report,
    write_text_report,
    export_results_to_csv,
    load_results_to_db,
)


def _results():
    return {
        'total_orders': 6,
        'total_revenue': 197.0,
        'category_revenue_percentage': pd.DataFrame({
            'category': ['Classic', 'Chicken', 'Veggie'],
            'revenue': [99.5, 79.0, 18.5],
            'revenue_percentage': [99.5 / 197 * 100, 79.0 / 197 * 100, 18.5 / 197 * 100],
        }),
        'top_n_by_quantity': pd.DataFrame({'name': [], 'quantity': []}),
    }


def test_result_to_frame_wraps_scalars():
    frame = result_to_frame('total_orders', 6)

    assert frame.to_dict('records') == [{'total_orders': 6}]


def test_result_to_frame_copies_tables():
    table = pd.DataFrame({'a': [1]})

    frame = result_to_frame('table', table)
    frame.loc[0, 'a'] = 2

    assert table.loc[0, 'a'] == 1


def test_render_text_report_rounds_only_for_display():
    results = _results()

    report = render_text_report(results, round_digits=2)

    assert 'Total orders: 6' in report
    assert 'Total revenue: 197.00' in report
    assert '50.51' in report
    assert '(no rows)' in report
    assert results['category_revenue_percentage']['revenue_percentage'].iloc[0] == 99.5 / 197 * 100


def test_export_results_to_csv(tmp_path):
    output_dir = tmp_path / 'output'

    exported = export_results_to_csv(_results(), str(output_dir), round_digits=1)

    assert set(exported) == set(_results())
    shares = pd.read_csv(exported['category_revenue_percentage'])
    assert shares['revenue_percentage'].tolist() == [50.5, 40.1, 9.4]
    assert pd.read_csv(exported['total_revenue'])['total_revenue'].tolist() == [197.0]


def test_write_text_report(tmp_path):
    path = write_text_report(_results(), str(tmp_path / 'out'))

    with open(path, encoding='utf-8') as report_file:
        assert report_file.read().startswith('Total orders: 6')


def test_load_results_to_db(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'results.db'}")

    tables = load_results_to_db(engine, _results())

    assert 'report_category_revenue_percentage' in tables
    shares = pd.read_sql_table('report_category_revenue_percentage', engine)
    assert shares['category'].tolist() == ['Classic', 'Chicken', 'Veggie']

    # Writing again replaces the previous tables
    load_results_to_db(engine, _results())
    assert len(pd.read_sql_table('report_total_orders', engine)) == 1

"""
Data quality report over unvalidated relations.
"""
from pizza_sales.ingestion.relations import Relations
from pizza_sales.transformation.quality import run_data_quality_checks, count_issues


def test_clean_data_has_no_issues(relations):
    results = run_data_quality_checks(relations.as_dict())

    assert count_issues(results) == 0
    assert set(results) == {'missing_values', 'duplicate_keys', 'value_ranges', 'referential_integrity'}


def test_report_lists_every_kind_of_issue(raw_frames):
    raw_frames['pizzas'].loc[0, 'price'] = -16.75
    raw_frames['order_details'].loc[1, 'quantity'] = 0
    raw_frames['order_details'].loc[2, 'pizza_id'] = 'calabrese_l'
    raw_frames['orders'].loc[5, 'order_id'] = 5
    raw_frames['pizza_types'].loc[0, 'name'] = None

    results = run_data_quality_checks(Relations.from_frames(validate=False, **raw_frames).as_dict())

    assert results['missing_values']['pizza_types']['missing_columns'] == {'name': 1}
    assert results['duplicate_keys']['orders']['duplicate_count'] == 2
    assert results['duplicate_keys']['orders']['duplicate_keys'] == [5]
    assert results['value_ranges']['pizzas']['price']['invalid_keys'] == ['bbq_ckn_m']
    assert results['value_ranges']['order_details']['quantity']['invalid_keys'] == [2]

    relationship = results['referential_integrity']['order_details.pizza_id -> pizzas.pizza_id']
    assert relationship['orphaned_examples'] == ['calabrese_l']

    # 1 missing + 2 duplicate rows + 2 out of range + 1 orphan
    assert count_issues(results) == 6

"""
Data quality checks for the pizza sales relations.
"""
import logging
import numpy as np
import traceback

from pizza_sales.exceptions import MalformedRowError
from pizza_sales.ingestion.relations import SCHEMAS, PRIMARY_KEYS, FOREIGN_KEYS

logger = logging.getLogger(__name__)

# Columns that may legitimately be empty
OPTIONAL_COLUMNS = {
    'pizza_types': ['ingredients'],
}

# Expected value ranges and conditions
RANGE_CHECKS = {
    'pizzas': {
        'price': (lambda x: np.isfinite(x) & (x >= 0), 'must be a non-negative number'),
    },
    'order_details': {
        'quantity': (lambda x: x > 0, 'must be a positive integer'),
    },
}

def run_data_quality_checks(data_frames):
    """
    Run a series of data quality checks on the input data.

    Returns a report dict; nothing is modified or raised.
    """
    try:
        logger.info("Running data quality checks")

        quality_results = {}

        # Run individual checks
        quality_results['missing_values'] = check_missing_values(data_frames)
        quality_results['duplicate_keys'] = check_duplicate_keys(data_frames)
        quality_results['value_ranges'] = check_value_ranges(data_frames)
        quality_results['referential_integrity'] = check_referential_integrity(data_frames)

        total_issues = count_issues(quality_results)

        if total_issues > 0:
            logger.warning(f"Found a total of {total_issues} data quality issues")
        else:
            logger.info("All data quality checks passed")

        return quality_results
    except Exception as e:
        logger.error(f"Error running data quality checks: {str(e)}")
        logger.error(traceback.format_exc())
        raise

def count_issues(quality_results):
    """Total number of problems recorded in a quality report."""
    total = 0
    for table, result in quality_results.get('missing_values', {}).items():
        total += result['total_missing']
    for table, result in quality_results.get('duplicate_keys', {}).items():
        total += result['duplicate_count']
    for table, columns in quality_results.get('value_ranges', {}).items():
        total += sum(result['invalid_count'] for result in columns.values())
    for relationship, result in quality_results.get('referential_integrity', {}).items():
        total += result['orphaned_count']
    return total

def check_missing_values(data_frames):
    """
    Check for missing values in required columns of each DataFrame.
    """
    results = {}

    for table_name, df in data_frames.items():
        required = [
            col for col in SCHEMAS.get(table_name, df.columns)
            if col in df.columns and col not in OPTIONAL_COLUMNS.get(table_name, [])
        ]

        # Get count of missing values by column
        missing_by_column = df[required].isnull().sum()
        total_missing = int(missing_by_column.sum())

        # Only include columns with missing values
        missing_columns = {
            col: int(count) for col, count in missing_by_column.items() if count > 0
        }

        results[table_name] = {
            'total_missing': total_missing,
            'missing_columns': missing_columns
        }

        if total_missing > 0:
            logger.warning(f"Table '{table_name}' has {total_missing} missing values")
            for col, count in missing_columns.items():
                logger.warning(f"  - Column '{col}': {count} missing values")

    return results

def check_duplicate_keys(data_frames):
    """
    Check for duplicate primary keys in each DataFrame.
    """
    results = {}

    for table_name, df in data_frames.items():
        pk_column = PRIMARY_KEYS.get(table_name)
        if pk_column is None or pk_column not in df.columns:
            continue

        duplicates = df[df.duplicated(subset=[pk_column], keep=False)]
        duplicate_count = len(duplicates)

        results[table_name] = {
            'duplicate_count': duplicate_count,
            'duplicate_keys': duplicates[pk_column].drop_duplicates().head(10).tolist()
        }

        if duplicate_count > 0:
            logger.warning(f"Table '{table_name}' has {duplicate_count} rows sharing a primary key")

    return results

def check_value_ranges(data_frames):
    """
    Check for values outside of expected ranges.
    """
    results = {}

    for table_name, checks in RANGE_CHECKS.items():
        if table_name not in data_frames:
            continue

        df = data_frames[table_name]
        table_results = {}

        for column, (condition, description) in checks.items():
            values = df[column].dropna()
            invalid_mask = ~condition(values)
            invalid = df.loc[invalid_mask[invalid_mask].index]
            invalid_count = len(invalid)

            table_results[column] = {
                'invalid_count': invalid_count,
                'rule': description,
                'invalid_keys': invalid[PRIMARY_KEYS[table_name]].head(5).tolist()
            }

            if invalid_count > 0:
                logger.warning(f"Table '{table_name}' has {invalid_count} invalid values in column '{column}'")

        results[table_name] = table_results

    return results

def check_referential_integrity(data_frames):
    """
    Check referential integrity between tables.
    """
    results = {}

    for fk in FOREIGN_KEYS:
        relationship = f"{fk['table']}.{fk['key']} -> {fk['ref_table']}.{fk['ref_key']}"
        if fk['table'] not in data_frames or fk['ref_table'] not in data_frames:
            continue

        # Get all foreign key values
        fk_values = set(data_frames[fk['table']][fk['key']].dropna().unique())

        # Get all reference key values
        ref_values = set(data_frames[fk['ref_table']][fk['ref_key']].dropna().unique())

        # Find orphaned values (foreign keys without matching reference keys)
        orphaned = sorted(fk_values - ref_values, key=str)
        orphaned_count = len(orphaned)

        results[relationship] = {
            'orphaned_count': orphaned_count,
            'orphaned_examples': orphaned[:10]
        }

        if orphaned_count > 0:
            logger.warning(
                f"Referential integrity issue: {orphaned_count} values in "
                f"{fk['table']}.{fk['key']} have no matching {fk['ref_table']}.{fk['ref_key']}"
            )

    return results

def validate_relations(relations, operation='load'):
    """
    Reject a snapshot whose rows break basic type or range constraints.

    Raises MalformedRowError naming the first offending row. Dangling
    foreign keys are left to the joins, which raise ReferentialIntegrityError.
    """
    data_frames = relations.as_dict()

    for table_name, result in check_missing_values(data_frames).items():
        if result['total_missing'] > 0:
            column = next(iter(result['missing_columns']))
            df = data_frames[table_name]
            row = df[df[column].isnull()].iloc[0]
            raise MalformedRowError(
                f"Missing value in column '{column}'",
                operation=operation,
                table=table_name,
                key=None if column == PRIMARY_KEYS[table_name] else row[PRIMARY_KEYS[table_name]],
            )

    for table_name, result in check_duplicate_keys(data_frames).items():
        if result['duplicate_count'] > 0:
            raise MalformedRowError(
                f"Duplicate primary key '{PRIMARY_KEYS[table_name]}'",
                operation=operation,
                table=table_name,
                key=result['duplicate_keys'][0],
            )

    for table_name, columns in check_value_ranges(data_frames).items():
        for column, result in columns.items():
            if result['invalid_count'] > 0:
                raise MalformedRowError(
                    f"Column '{column}' {result['rule']}",
                    operation=operation,
                    table=table_name,
                    key=result['invalid_keys'][0],
                )

    logger.info("Relations passed validation")

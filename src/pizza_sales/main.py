"""
Command line runner for the pizza sales query battery.
"""
import logging
import argparse
import time
import traceback
from datetime import datetime
from pizza_sales.config import Config
from pizza_sales.db.engine import create_db_engine, init_db
from pizza_sales.db.models import Base
from pizza_sales.ingestion.loader import (
    load_relations_from_csv,
    load_relations_from_db,
    write_relations_to_db
)
from pizza_sales.transformation.analytics import SalesAnalytics
from pizza_sales.transformation.joins import check_for_missing_relationships
from pizza_sales.transformation.quality import run_data_quality_checks, count_issues
from pizza_sales.loading.writer import (
    export_results_to_csv,
    load_results_to_db,
    render_text_report,
    write_text_report
)

logger = logging.getLogger(__name__)

def run_report(config_file='config.ini', source='csv', init_database=False, seed_database=False,
               quality_check=True, export_csv=False, write_db=False, overrides=None, config=None):
    """
    Load the relations, run the whole query battery and export the results.

    Returns:
        dict: Run statistics; 'results' holds the computed metrics on success
    """
    start_time = time.time()
    statistics = {
        'start_time': datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
        'status': 'failed',
        'stages': {},
    }

    try:
        logger.info("Starting pizza sales report")

        # Load configuration
        if config is None:
            config = Config(config_file)

        settings = config.get_analysis_settings()
        settings.update({key: value for key, value in (overrides or {}).items() if value is not None})

        logger.info(f"Report mode: source={source}, settings={settings}")

        engine = None
        if source == 'database' or init_database or seed_database or write_db:
            engine = create_db_engine(config)

        if init_database or seed_database:
            init_db(engine, Base)

        # ---- Ingestion
        stage_start = time.time()

        if source == 'csv':
            relations = load_relations_from_csv(config)
        elif source == 'database':
            relations = load_relations_from_db(engine)
        else:
            raise ValueError(f"Unsupported source: {source}")

        statistics['stages']['ingestion'] = {
            'source': source,
            'duration': time.time() - stage_start,
            'rows_loaded': {
                table: len(df) for table, df in relations.as_dict().items()
            }
        }

        if seed_database:
            write_relations_to_db(engine, relations)
            statistics['stages']['ingestion']['seeded_database'] = True

        # ---- Quality report
        if quality_check:
            stage_start = time.time()

            relationship_issues = check_for_missing_relationships(relations)
            quality_results = run_data_quality_checks(relations.as_dict())

            statistics['stages']['quality_check'] = {
                'duration': time.time() - stage_start,
                'issues_found': count_issues(quality_results),
                'orders_with_no_items': relationship_issues['orders_with_no_items_count'],
                'unused_pizzas': relationship_issues['unused_pizzas_count']
            }

        # ---- Analysis
        stage_start = time.time()

        results = SalesAnalytics(relations).run_all(settings)

        statistics['stages']['analysis'] = {
            'duration': time.time() - stage_start,
            'metrics_computed': len(results)
        }

        # ---- Export
        if export_csv:
            output_dir = config.get_output_path()
            exported_files = export_results_to_csv(results, output_dir, settings['round_digits'])
            report_path = write_text_report(results, output_dir, settings['round_digits'])
            statistics['stages']['export'] = {
                'files_exported': len(exported_files) + 1,
                'report_path': report_path,
                'file_paths': exported_files
            }

        if write_db:
            tables = load_results_to_db(engine, results)
            statistics['stages']['loading'] = {
                'tables_written': len(tables)
            }

        statistics['results'] = results
        statistics['round_digits'] = settings['round_digits']
        statistics['status'] = 'success'
        logger.info("Pizza sales report completed successfully")

    except Exception as e:
        logger.error(f"Report execution failed: {str(e)}")
        logger.error(traceback.format_exc())
        statistics['status'] = 'failed'
        statistics['error'] = str(e)

    # Calculate total duration
    statistics['duration'] = time.time() - start_time

    return statistics

def main(argv=None):
    """Command line entry point."""
    parser = argparse.ArgumentParser(description='Pizza Sales Analytics')
    parser.add_argument('--config', default='config.ini', help='Path to configuration file')
    parser.add_argument('--source', choices=['csv', 'database'], default='csv', help='Where to load the relations from')
    parser.add_argument('--init-db', action='store_true', help='Create the database tables')
    parser.add_argument('--seed-db', action='store_true', help='Copy the loaded relations into the database tables')
    parser.add_argument('--no-quality-check', action='store_true', help='Skip the data quality report')
    parser.add_argument('--export-csv', action='store_true', help='Export results to CSV files and a text report')
    parser.add_argument('--write-db', action='store_true', help='Write result tables to the database')
    parser.add_argument('--dense-hours', action='store_true', default=None, help='Report all 24 hours in orders by hour')
    parser.add_argument('--top-n-quantity', type=int, help='Rows in the top pizzas by quantity')
    parser.add_argument('--top-n-revenue', type=int, help='Rows in the top pizzas by revenue')
    parser.add_argument('--top-n-per-category', type=int, help='Rows per category in the ranked revenue table')

    args = parser.parse_args(argv)

    # Run the report
    results = run_report(
        config_file=args.config,
        source=args.source,
        init_database=args.init_db,
        seed_database=args.seed_db,
        quality_check=not args.no_quality_check,
        export_csv=args.export_csv,
        write_db=args.write_db,
        overrides={
            'dense_hours': args.dense_hours,
            'top_n_quantity': args.top_n_quantity,
            'top_n_revenue': args.top_n_revenue,
            'top_n_per_category': args.top_n_per_category
        }
    )

    if results['status'] == 'success':
        print(render_text_report(results['results'], results['round_digits']))

    # Print summary
    print("\nReport Execution Summary:")
    print(f"Status: {results['status']}")
    print(f"Duration: {results['duration']:.2f} seconds")

    if results['status'] == 'failed' and 'error' in results:
        print(f"Error: {results['error']}")

    for stage, stats in results.get('stages', {}).items():
        print(f"\n{stage.capitalize()} stage:")
        for key, value in stats.items():
            if key != 'rows_loaded' and key != 'file_paths':
                print(f"  {key}: {value}")

    return 0 if results['status'] == 'success' else 1

if __name__ == "__main__":
    raise SystemExit(main())

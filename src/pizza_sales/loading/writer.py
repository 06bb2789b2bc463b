"""
Export components for the pizza sales analytics results.

Rounding happens here and only here; the calculations keep full precision.
"""
import os
import logging
import pandas as pd
import traceback

logger = logging.getLogger(__name__)

# Prefix of result tables written to the database
RESULT_TABLE_PREFIX = 'report_'

def result_to_frame(name, value):
    """
    Represent any metric result as a DataFrame.

    Scalars become a single row with one column named after the metric.
    """
    if isinstance(value, pd.DataFrame):
        return value.copy()
    return pd.DataFrame({name: [value]})

def _format_scalar(value, round_digits):
    if isinstance(value, float):
        return f"{value:.{round_digits}f}"
    return str(value)

def render_text_report(results, round_digits=2):
    """
    Format a battery of results as a plain-text report.
    """
    sections = []

    for name, value in results.items():
        title = name.replace('_', ' ').capitalize()

        if isinstance(value, pd.DataFrame):
            body = value.round(round_digits).to_string(index=False) if len(value) > 0 else "(no rows)"
            sections.append(f"{title}\n{'-' * len(title)}\n{body}")
        else:
            sections.append(f"{title}: {_format_scalar(value, round_digits)}")

    return "\n\n".join(sections) + "\n"

def write_text_report(results, output_dir, round_digits=2, file_name='report.txt'):
    """
    Write the text report to the output directory.

    Returns:
        str: Path of the written report
    """
    if not os.path.exists(output_dir):
        os.makedirs(output_dir)

    file_path = os.path.join(output_dir, file_name)
    with open(file_path, 'w', encoding='utf-8') as report_file:
        report_file.write(render_text_report(results, round_digits))

    logger.info(f"Wrote report to {file_path}")
    return file_path

def export_results_to_csv(results, output_dir, round_digits=2):
    """
    Export every result to its own CSV file.

    Returns:
        dict: Result name -> file path
    """
    try:
        # Create output directory if it doesn't exist
        if not os.path.exists(output_dir):
            os.makedirs(output_dir)

        exported_files = {}

        for name, value in results.items():
            df = result_to_frame(name, value).round(round_digits)
            file_path = os.path.join(output_dir, f"{name}.csv")
            df.to_csv(file_path, index=False)
            exported_files[name] = file_path
            logger.info(f"Exported {len(df)} rows to {file_path}")

        return exported_files
    except Exception as e:
        logger.error(f"Error exporting results to CSV: {str(e)}")
        logger.error(traceback.format_exc())
        raise

def load_results_to_db(engine, results):
    """
    Replace one database table per result.

    Returns:
        list: Names of the tables written
    """
    try:
        logger.info("Loading results to target tables")

        written = []
        with engine.begin() as conn:
            for name, value in results.items():
                table_name = f"{RESULT_TABLE_PREFIX}{name}"
                df = result_to_frame(name, value)
                df.to_sql(table_name, conn, if_exists='replace', index=False)
                written.append(table_name)
                logger.info(f"Successfully loaded {len(df)} rows to {table_name}")

        return written
    except Exception as e:
        logger.error(f"Error loading results to database: {str(e)}")
        logger.error(traceback.format_exc())
        raise

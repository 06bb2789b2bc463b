"""
Data ingestion components for the pizza sales analytics.
"""
import os
import logging
import pandas as pd
import traceback
from sqlalchemy import delete

from pizza_sales.db.models import Base, TABLES
from pizza_sales.ingestion.relations import Relations

logger = logging.getLogger(__name__)

# Source file for each relation
CSV_FILES = {
    'pizza_types': 'pizza_types.csv',
    'pizzas': 'pizzas.csv',
    'orders': 'orders.csv',
    'order_details': 'order_details.csv',
}

# Text columns are read as strings; numeric columns are coerced by Relations
CSV_DTYPES = {
    'pizza_types': {
        'pizza_type_id': 'str',
        'name': 'str',
        'category': 'str',
        'ingredients': 'str'
    },
    'pizzas': {
        'pizza_id': 'str',
        'pizza_type_id': 'str',
        'size': 'str'
    },
    'orders': {
        'date': 'str',
        'time': 'str'
    },
    'order_details': {
        'pizza_id': 'str'
    },
}

def read_csv_relation(file_path, table_name, encoding='utf-8'):
    """
    Read one source CSV file into a DataFrame.

    """
    logger.info(f"Loading {table_name} from {file_path}")

    # Check if file exists
    if not os.path.exists(file_path):
        logger.error(f"File not found: {file_path}")
        raise FileNotFoundError(f"Source file for {table_name} not found: {file_path}")

    df = pd.read_csv(file_path, dtype=CSV_DTYPES[table_name], encoding=encoding)

    logger.info(f"Loaded {len(df)} rows from {file_path}")

    missing_values = df.isnull().sum().sum()
    if missing_values > 0:
        logger.warning(f"Found {missing_values} missing values in {file_path}")

    return df

def load_relations_from_csv(config, validate=True):
    """
    Load the four source CSV files from the configured input directory.

    Args:
        config: Configuration object
        validate (bool): Run the strict quality gate on the snapshot

    Returns:
        Relations: Snapshot of the four relations
    """
    try:
        encoding = config.get_encoding()
        frames = {
            table: read_csv_relation(config.get_input_path(file_name), table, encoding)
            for table, file_name in CSV_FILES.items()
        }
        return Relations.from_frames(validate=validate, **frames)
    except Exception as e:
        logger.error(f"Failed to load relations from CSV: {str(e)}")
        logger.error(traceback.format_exc())
        raise

def load_relations_from_db(engine, validate=True):
    """
    Load the four relations from their database tables.
    """
    try:
        frames = {}
        for table in TABLES:
            frames[table] = pd.read_sql_table(table, engine)
            logger.info(f"Loaded {len(frames[table])} rows from table {table}")

        return Relations.from_frames(validate=validate, **frames)
    except Exception as e:
        logger.error(f"Failed to load relations from database: {str(e)}")
        logger.error(traceback.format_exc())
        raise

def write_relations_to_db(engine, relations):
    """
    Replace the contents of the four tables with a snapshot.

    Existing rows are deleted child tables first, then the relations are
    inserted parents first, in one transaction.
    """
    frames = relations.as_dict().copy()

    orders = frames['orders'].copy()
    orders['date'] = orders['date'].dt.date
    orders['time'] = (pd.Timestamp(0) + orders['time']).dt.time
    frames['orders'] = orders

    try:
        with engine.begin() as conn:
            for table in reversed(TABLES):
                conn.execute(delete(Base.metadata.tables[table]))
                logger.info(f"Cleared table {table}")

            for table in TABLES:
                frames[table].to_sql(table, conn, if_exists='append', index=False)
                logger.info(f"Inserted {len(frames[table])} rows into {table}")
    except Exception as e:
        logger.error(f"Error writing relations to database: {str(e)}")
        logger.error(traceback.format_exc())
        raise

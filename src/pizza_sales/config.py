"""
Configuration handling for the pizza sales analytics.
"""
import os
import logging
import configparser
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()
# Load environment variables
DB_TYPE = os.getenv("DB_TYPE", "sqlite")
DB_NAME = os.getenv("POSTGRES_DB", "data/pizza_sales.db")
POSTGRES_HOST = os.getenv("POSTGRES_HOST", "")
POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")
POSTGRES_USER = os.getenv("POSTGRES_USER", "")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "")

class Config:
    """Configuration manager for the pizza sales analytics."""

    def __init__(self, config_file='config.ini', setup_logging=True):
        """
        Initialize configuration from config file.
        """
        self.config = configparser.ConfigParser(interpolation=None)

        # Set default values
        self._set_defaults()

        # Try to read from config file
        config_path = Path(config_file)
        if config_path.exists():
            self.config.read(config_path)
        else:
            logging.getLogger(__name__).warning(
                f"Config file {config_file} not found. Using defaults."
            )

        if setup_logging:
            self._setup_logging()

    def _set_defaults(self):
        """Set default configuration values."""
        self.config['DATABASE'] = {
            'type': DB_TYPE,
            'name': DB_NAME,
            'host': POSTGRES_HOST,
            'port': POSTGRES_PORT,
            'user': POSTGRES_USER,
            'password': POSTGRES_PASSWORD
        }

        self.config['LOGGING'] = {
            'level': 'INFO',
            'file': 'logs/pizza_sales.log'
        }

        self.config['PATHS'] = {
            'input_dir': 'data/input',
            'output_dir': 'data/output',
            'encoding': 'utf-8'
        }

        self.config['ANALYSIS'] = {
            'top_n_quantity': '5',
            'top_n_revenue': '3',
            'top_n_per_category': '3',
            'dense_hours': 'false',
            'round_digits': '2'
        }

    def _setup_logging(self):
        """Configure logging based on settings."""
        log_config = self.config['LOGGING']
        log_level = getattr(logging, log_config.get('level', 'INFO').upper(), logging.INFO)
        log_file = log_config.get('file', 'logs/pizza_sales.log')

        handlers = [logging.StreamHandler()]
        if log_file:
            # Create directory for log file if it doesn't exist
            log_dir = os.path.dirname(log_file)
            if log_dir and not os.path.exists(log_dir):
                os.makedirs(log_dir)
            handlers.append(logging.FileHandler(log_file))

        # Configure logging
        logging.basicConfig(
            level=log_level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=handlers
        )

    def get_database_config(self):
        """
        Get database configuration.

        """
        return {
            'type': self.config['DATABASE'].get('type'),
            'name': self.config['DATABASE'].get('name'),
            'host': self.config['DATABASE'].get('host'),
            'port': self.config['DATABASE'].get('port'),
            'user': self.config['DATABASE'].get('user'),
            'password': self.config['DATABASE'].get('password')
        }

    def get_input_path(self, filename=None):
        """
        Get input directory or file path.

        """
        input_dir = self.config['PATHS'].get('input_dir', 'data/input')

        if filename:
            return os.path.join(input_dir, filename)
        return input_dir

    def get_output_path(self, filename=None):
        """
        Get output directory or file path.

        """
        output_dir = self.config['PATHS'].get('output_dir', 'data/output')

        # Create directory if it doesn't exist
        if not os.path.exists(output_dir):
            os.makedirs(output_dir)

        if filename:
            return os.path.join(output_dir, filename)
        return output_dir

    def get_encoding(self):
        """Encoding of the source CSV files."""
        return self.config['PATHS'].get('encoding', 'utf-8')

    def get_analysis_settings(self):
        """
        Get the parameters of the query battery.
        """
        analysis = self.config['ANALYSIS']
        return {
            'top_n_quantity': analysis.getint('top_n_quantity', 5),
            'top_n_revenue': analysis.getint('top_n_revenue', 3),
            'top_n_per_category': analysis.getint('top_n_per_category', 3),
            'dense_hours': analysis.getboolean('dense_hours', False),
            'round_digits': analysis.getint('round_digits', 2)
        }

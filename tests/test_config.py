"""
Configuration defaults and overrides.
"""
from pizza_sales.config import Config


def test_defaults_without_config_file(tmp_path):
    config = Config(str(tmp_path / 'missing.ini'), setup_logging=False)

    assert config.get_analysis_settings() == {
        'top_n_quantity': 5,
        'top_n_revenue': 3,
        'top_n_per_category': 3,
        'dense_hours': False,
        'round_digits': 2,
    }
    assert config.get_encoding() == 'utf-8'
    assert config.get_input_path('orders.csv').endswith('orders.csv')


def test_config_file_overrides_analysis_settings(make_config):
    config = make_config(top_n_quantity=10, dense_hours='true', round_digits=4)

    settings = config.get_analysis_settings()

    assert settings['top_n_quantity'] == 10
    assert settings['dense_hours'] is True
    assert settings['round_digits'] == 4
    assert settings['top_n_revenue'] == 3


def test_output_path_is_created(make_config, tmp_path):
    config = make_config()

    path = config.get_output_path('report.txt')

    assert (tmp_path / 'output').is_dir()
    assert path.endswith('report.txt')


def test_database_config(make_config):
    db_config = make_config(db_type='postgresql').get_database_config()

    assert db_config['type'] == 'postgresql'
    assert db_config['name'].endswith('pizza_sales.db')

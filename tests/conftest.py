"""
Shared fixtures: a small hand-computed pizza sales dataset.
"""
import pandas as pd
import pytest

from pizza_sales.config import Config
from pizza_sales.ingestion.relations import Relations
from pizza_sales.transformation.analytics import SalesAnalytics


def make_raw_frames():
    pizza_types = pd.DataFrame({
        'pizza_type_id': ['bbq_ckn', 'thai_ckn', 'hawaiian', 'classic_dlx', 'big_meat', 'five_cheese', 'spinach_fet'],
        'name': [
            'The Barbecue Chicken Pizza',
            'The Thai Chicken Pizza',
            'The Hawaiian Pizza',
            'The Classic Deluxe Pizza',
            'The Big Meat Pizza',
            'The Five Cheese Pizza',
            'The Spinach and Feta Pizza',
        ],
        'category': ['Chicken', 'Chicken', 'Classic', 'Classic', 'Classic', 'Veggie', 'Veggie'],
        'ingredients': [
            'Barbecued Chicken, Red Peppers, Green Peppers, Tomatoes, Red Onions, Barbecue Sauce',
            'Chicken, Pineapple, Tomatoes, Red Peppers, Thai Sweet Chilli Sauce',
            'Sliced Ham, Pineapple, Mozzarella Cheese',
            'Pepperoni, Mushrooms, Red Onions, Red Peppers, Bacon',
            'Bacon, Pepperoni, Italian Sausage, Chorizo Sausage',
            'Mozzarella Cheese, Provolone Cheese, Smoked Gouda Cheese, Romano Cheese, Blue Cheese, Garlic',
            'Spinach, Mushrooms, Red Onions, Feta Cheese, Garlic',
        ],
    })

    pizzas = pd.DataFrame({
        'pizza_id': [
            'bbq_ckn_m', 'bbq_ckn_l', 'thai_ckn_l', 'hawaiian_s',
            'classic_dlx_m', 'big_meat_s', 'five_cheese_l', 'spinach_fet_m',
        ],
        'pizza_type_id': [
            'bbq_ckn', 'bbq_ckn', 'thai_ckn', 'hawaiian',
            'classic_dlx', 'big_meat', 'five_cheese', 'spinach_fet',
        ],
        'size': ['M', 'L', 'L', 'S', 'M', 'S', 'L', 'M'],
        'price': [16.75, 20.75, 20.75, 10.50, 16.00, 12.00, 18.50, 16.00],
    })

    orders = pd.DataFrame({
        'order_id': [1, 2, 3, 4, 5, 6],
        'date': ['2015-01-01', '2015-01-01', '2015-01-01', '2015-01-02', '2015-01-03', '2015-01-03'],
        'time': ['11:38:36', '11:57:40', '12:12:28', '18:05:00', '12:30:00', '23:10:00'],
    })

    # Order 6 has no line items
    order_details = pd.DataFrame({
        'order_details_id': [1, 2, 3, 4, 5, 6, 7, 8, 9],
        'order_id': [1, 1, 2, 3, 3, 4, 4, 5, 5],
        'pizza_id': [
            'hawaiian_s', 'classic_dlx_m', 'bbq_ckn_l', 'thai_ckn_l', 'five_cheese_l',
            'big_meat_s', 'bbq_ckn_m', 'hawaiian_s', 'classic_dlx_m',
        ],
        'quantity': [1, 1, 2, 1, 1, 3, 1, 2, 1],
    })

    return {
        'pizza_types': pizza_types,
        'pizzas': pizzas,
        'orders': orders,
        'order_details': order_details,
    }


@pytest.fixture
def raw_frames():
    return make_raw_frames()


@pytest.fixture
def relations(raw_frames):
    return Relations.from_frames(**raw_frames)


@pytest.fixture
def analytics(relations):
    return SalesAnalytics(relations)


@pytest.fixture
def scenario_relations():
    """One type, one pizza, one order, one line item of two pizzas."""
    return Relations.from_frames(
        pizza_types=pd.DataFrame({
            'pizza_type_id': ['bbq_ckn'],
            'name': ['bbq_ckn'],
            'category': ['Chicken'],
            'ingredients': ['Barbecued Chicken'],
        }),
        pizzas=pd.DataFrame({
            'pizza_id': ['bbq_ckn_m'],
            'pizza_type_id': ['bbq_ckn'],
            'size': ['M'],
            'price': [16.00],
        }),
        orders=pd.DataFrame({
            'order_id': [1],
            'date': ['2015-01-01'],
            'time': ['12:00:00'],
        }),
        order_details=pd.DataFrame({
            'order_details_id': [1],
            'order_id': [1],
            'pizza_id': ['bbq_ckn_m'],
            'quantity': [2],
        }),
    )


@pytest.fixture
def empty_details_relations(raw_frames):
    raw_frames['order_details'] = raw_frames['order_details'].iloc[0:0]
    return Relations.from_frames(**raw_frames)


@pytest.fixture
def write_csv_dataset(tmp_path):
    """Write a set of raw frames as the four source CSV files."""
    def _write(frames, directory=None):
        directory = directory or tmp_path / 'input'
        directory.mkdir(parents=True, exist_ok=True)
        for table, df in frames.items():
            df.to_csv(directory / f"{table}.csv", index=False)
        return directory
    return _write


@pytest.fixture
def make_config(tmp_path):
    """Build a Config backed by an INI file under tmp_path."""
    def _make(db_type='sqlite', **analysis):
        lines = [
            '[DATABASE]',
            f'type = {db_type}',
            f"name = {tmp_path / 'db' / 'pizza_sales.db'}",
            '',
            '[LOGGING]',
            'level = INFO',
            f"file = {tmp_path / 'logs' / 'test.log'}",
            '',
            '[PATHS]',
            f"input_dir = {tmp_path / 'input'}",
            f"output_dir = {tmp_path / 'output'}",
            'encoding = utf-8',
            '',
            '[ANALYSIS]',
        ]
        lines.extend(f'{key} = {value}' for key, value in analysis.items())

        config_file = tmp_path / 'config.ini'
        config_file.write_text('\n'.join(lines) + '\n')
        return Config(str(config_file), setup_logging=False)
    return _make

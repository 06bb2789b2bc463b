"""
Sales analytics engine over one snapshot of the pizza sales relations.
"""
import logging

from pizza_sales.transformation import calculations

logger = logging.getLogger(__name__)

# Names of the query battery in report order
OPERATIONS = [
    'total_orders',
    'total_revenue',
    'highest_priced_pizza',
    'most_common_size',
    'top_n_by_quantity',
    'category_quantity_totals',
    'orders_by_hour',
    'avg_pizzas_per_day',
    'pizza_count_by_category',
    'top_n_by_revenue',
    'category_revenue_percentage',
    'cumulative_revenue_by_date',
    'top_n_by_revenue_per_category',
]


class SalesAnalytics:
    """
    Read-only query battery bound to a Relations snapshot.

    Each method is a pure computation; calling it twice returns equal
    results and leaves the relations untouched.
    """

    def __init__(self, relations):
        self.relations = relations

    def total_orders(self):
        return calculations.total_orders(self.relations)

    def total_revenue(self):
        return calculations.total_revenue(self.relations)

    def highest_priced_pizza(self):
        return calculations.highest_priced_pizza(self.relations)

    def most_common_size(self):
        return calculations.most_common_size(self.relations)

    def top_n_by_quantity(self, n=5):
        return calculations.top_n_by_quantity(self.relations, n)

    def category_quantity_totals(self):
        return calculations.category_quantity_totals(self.relations)

    def orders_by_hour(self, dense=False):
        return calculations.orders_by_hour(self.relations, dense)

    def avg_pizzas_per_day(self):
        return calculations.avg_pizzas_per_day(self.relations)

    def pizza_count_by_category(self):
        return calculations.pizza_count_by_category(self.relations)

    def top_n_by_revenue(self, n=3):
        return calculations.top_n_by_revenue(self.relations, n)

    def category_revenue_percentage(self):
        return calculations.category_revenue_percentage(self.relations)

    def cumulative_revenue_by_date(self):
        return calculations.cumulative_revenue_by_date(self.relations)

    def top_n_by_revenue_per_category(self, n=3):
        return calculations.top_n_by_revenue_per_category(self.relations, n)

    def run_all(self, settings=None):
        """
        Run the whole battery and return results keyed by operation name.

        Args:
            settings (dict): Optional analysis settings as returned by
                Config.get_analysis_settings()

        Returns:
            dict: Operation name -> scalar or DataFrame, in report order
        """
        settings = settings or {}

        parameters = {
            'top_n_by_quantity': {'n': settings.get('top_n_quantity', 5)},
            'orders_by_hour': {'dense': settings.get('dense_hours', False)},
            'top_n_by_revenue': {'n': settings.get('top_n_revenue', 3)},
            'top_n_by_revenue_per_category': {'n': settings.get('top_n_per_category', 3)},
        }

        results = {}
        for operation in OPERATIONS:
            results[operation] = getattr(self, operation)(**parameters.get(operation, {}))

        logger.info(f"Computed {len(results)} metrics")
        return results

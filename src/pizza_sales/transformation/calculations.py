"""
Business metrics calculations for the pizza sales analytics.

Every function takes a Relations snapshot, never modifies it, and returns
either a scalar or a DataFrame whose row order is part of the result.
Money and percentages are returned unrounded.
"""
import logging
import traceback

from pizza_sales.exceptions import EmptyInputError
from pizza_sales.transformation.joins import join_line_items, join_catalog
from pizza_sales.transformation.aggregates import (
    group_aggregate,
    running_total,
    top_n,
    pick_extremum
)

logger = logging.getLogger(__name__)

HOURS_IN_DAY = 24

def _require_line_items(line_items, operation):
    if len(line_items) == 0:
        raise EmptyInputError("No order details to aggregate", operation=operation, table='order_details')

def total_orders(relations):
    """
    Count distinct orders, whether or not they have line items.
    """
    logger.info("Counting total orders")

    total = int(relations.orders['order_id'].nunique())

    logger.info(f"Total orders: {total}")
    return total

def total_revenue(relations):
    """
    Sum price x quantity over all line items.
    """
    operation = 'total_revenue'
    try:
        logger.info("Calculating total revenue")

        line_items = join_line_items(relations, operation)
        _require_line_items(line_items, operation)

        total = float(line_items['revenue'].sum())

        logger.info(f"Total revenue: {total}")
        return total
    except Exception as e:
        logger.error(f"Error calculating total revenue: {str(e)}")
        logger.error(traceback.format_exc())
        raise

def highest_priced_pizza(relations):
    """
    Find the most expensive pizza variant.

    Ties on price go to the lowest pizza_id.
    """
    operation = 'highest_priced_pizza'
    try:
        logger.info("Identifying highest priced pizza")

        catalog = join_catalog(relations, operation)
        top = pick_extremum(catalog, ['price', 'pizza_id'], [False, True], operation, 'pizzas')

        return top[['name', 'price']]
    except Exception as e:
        logger.error(f"Error identifying highest priced pizza: {str(e)}")
        logger.error(traceback.format_exc())
        raise

def most_common_size(relations):
    """
    Find the pizza size with the largest total quantity ordered.

    Ties go to the alphabetically first size label.
    """
    operation = 'most_common_size'
    try:
        logger.info("Identifying most common pizza size")

        line_items = join_line_items(relations, operation)
        _require_line_items(line_items, operation)

        sizes = group_aggregate(line_items, 'size', {'total_quantity': ('quantity', 'sum')})
        top = pick_extremum(sizes, ['total_quantity', 'size'], [False, True], operation, 'order_details')

        logger.info(f"Most common size: {top.loc[0, 'size']}")
        return top
    except Exception as e:
        logger.error(f"Error identifying most common size: {str(e)}")
        logger.error(traceback.format_exc())
        raise

def top_n_by_quantity(relations, n=5):
    """
    Rank pizza types by total quantity ordered, keeping the first n.
    """
    operation = 'top_n_by_quantity'
    try:
        logger.info(f"Identifying top {n} pizza types by quantity")

        line_items = join_line_items(relations, operation)

        by_name = group_aggregate(line_items, 'name', {'quantity': ('quantity', 'sum')})
        top_items = top_n(by_name, n, ['quantity', 'name'], [False, True])

        logger.info(f"Identified {len(top_items)} top pizza types by quantity")
        return top_items
    except Exception as e:
        logger.error(f"Error identifying top pizza types by quantity: {str(e)}")
        logger.error(traceback.format_exc())
        raise

def category_quantity_totals(relations):
    """
    Total quantity ordered per category, largest first.
    """
    operation = 'category_quantity_totals'
    try:
        logger.info("Calculating quantity by category")

        line_items = join_line_items(relations, operation)

        totals = group_aggregate(
            line_items,
            'category',
            {'quantity': ('quantity', 'sum')},
            sort_by=['quantity', 'category'],
            ascending=[False, True]
        )

        logger.info(f"Calculated quantity for {len(totals)} categories")
        return totals
    except Exception as e:
        logger.error(f"Error calculating quantity by category: {str(e)}")
        logger.error(traceback.format_exc())
        raise

def orders_by_hour(relations, dense=False):
    """
    Count distinct orders per hour of day.

    Hours without orders are omitted unless dense is True, in which case
    all 24 hours are returned with zero counts filled in.
    """
    try:
        logger.info(f"Calculating orders by hour (dense={dense})")

        orders = relations.orders.assign(
            order_hour=(relations.orders['time'].dt.total_seconds() // 3600).astype('int64')
        )

        hours = group_aggregate(orders, 'order_hour', {'total_orders': ('order_id', 'nunique')})

        if dense:
            hours = (
                hours.set_index('order_hour')
                .reindex(range(HOURS_IN_DAY), fill_value=0)
                .rename_axis('order_hour')
                .reset_index()
            )

        hours['order_hour'] = hours['order_hour'].astype('int64')
        hours['total_orders'] = hours['total_orders'].astype('int64')

        logger.info(f"Calculated orders for {len(hours)} hours")
        return hours
    except Exception as e:
        logger.error(f"Error calculating orders by hour: {str(e)}")
        logger.error(traceback.format_exc())
        raise

def avg_pizzas_per_day(relations):
    """
    Mean over order dates of the pizzas ordered that day.
    """
    operation = 'avg_pizzas_per_day'
    try:
        logger.info("Calculating average pizzas ordered per day")

        line_items = join_line_items(relations, operation)
        _require_line_items(line_items, operation)

        daily = group_aggregate(line_items, 'date', {'quantity': ('quantity', 'sum')})
        average = float(daily['quantity'].mean())

        logger.info(f"Average pizzas per day over {len(daily)} days: {average}")
        return average
    except Exception as e:
        logger.error(f"Error calculating average pizzas per day: {str(e)}")
        logger.error(traceback.format_exc())
        raise

def pizza_count_by_category(relations):
    """
    Number of distinct pizza types on the menu in each category.

    A catalog metric; order data is not consulted.
    """
    try:
        logger.info("Counting pizza types by category")

        counts = group_aggregate(
            relations.pizza_types,
            'category',
            {'pizza_count': ('pizza_type_id', 'nunique')},
            sort_by=['pizza_count', 'category'],
            ascending=[False, True]
        )
        counts['pizza_count'] = counts['pizza_count'].astype('int64')

        return counts
    except Exception as e:
        logger.error(f"Error counting pizza types by category: {str(e)}")
        logger.error(traceback.format_exc())
        raise

def top_n_by_revenue(relations, n=3):
    """
    Rank pizza types by revenue, keeping the first n.
    """
    operation = 'top_n_by_revenue'
    try:
        logger.info(f"Identifying top {n} pizza types by revenue")

        line_items = join_line_items(relations, operation)

        by_name = group_aggregate(line_items, 'name', {'revenue': ('revenue', 'sum')})
        top_items = top_n(by_name, n, ['revenue', 'name'], [False, True])

        logger.info(f"Identified {len(top_items)} top pizza types by revenue")
        return top_items
    except Exception as e:
        logger.error(f"Error identifying top pizza types by revenue: {str(e)}")
        logger.error(traceback.format_exc())
        raise

def category_revenue_percentage(relations):
    """
    Share of total revenue contributed by each category, in percent.

    The per-category revenue is kept alongside the percentage. When total
    revenue is zero every share is reported as 0.
    """
    operation = 'category_revenue_percentage'
    try:
        logger.info("Calculating revenue share by category")

        line_items = join_line_items(relations, operation)
        _require_line_items(line_items, operation)

        total = line_items['revenue'].sum()

        shares = group_aggregate(
            line_items,
            'category',
            {'revenue': ('revenue', 'sum')},
            sort_by=['revenue', 'category'],
            ascending=[False, True]
        )

        if total > 0:
            shares['revenue_percentage'] = shares['revenue'] / total * 100
        else:
            logger.warning("Total revenue is zero, reporting 0% for every category")
            shares['revenue_percentage'] = 0.0

        return shares
    except Exception as e:
        logger.error(f"Error calculating revenue share by category: {str(e)}")
        logger.error(traceback.format_exc())
        raise

def cumulative_revenue_by_date(relations):
    """
    Daily revenue with a running total in ascending date order.
    """
    operation = 'cumulative_revenue_by_date'
    try:
        logger.info("Calculating cumulative revenue by date")

        line_items = join_line_items(relations, operation)

        daily = group_aggregate(line_items, 'date', {'revenue': ('revenue', 'sum')})
        daily = daily.rename(columns={'date': 'order_date'})

        cumulative = running_total(daily, 'order_date', 'revenue', 'cumulative_revenue')

        logger.info(f"Calculated cumulative revenue over {len(cumulative)} days")
        return cumulative
    except Exception as e:
        logger.error(f"Error calculating cumulative revenue: {str(e)}")
        logger.error(traceback.format_exc())
        raise

def top_n_by_revenue_per_category(relations, n=3):
    """
    Top n pizza types by revenue within each category.

    Ranks are row numbers: equal revenue still gets distinct ranks, the
    alphabetically first name ranking higher. Rows are ordered by category
    then rank.
    """
    operation = 'top_n_by_revenue_per_category'
    try:
        logger.info(f"Identifying top {n} pizza types by revenue per category")

        line_items = join_line_items(relations, operation)

        by_name = group_aggregate(line_items, ['category', 'name'], {'revenue': ('revenue', 'sum')})
        ranked = top_n(
            by_name,
            n,
            ['revenue', 'name'],
            [False, True],
            partition_by='category',
            keep_rank=True
        )

        logger.info(f"Identified {len(ranked)} ranked pizza types across categories")
        return ranked[['category', 'name', 'revenue', 'rank']]
    except Exception as e:
        logger.error(f"Error identifying top pizza types per category: {str(e)}")
        logger.error(traceback.format_exc())
        raise

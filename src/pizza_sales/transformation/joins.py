"""
Data joining operations for the pizza sales analytics.
"""
import logging
import pandas as pd
import traceback

from pizza_sales.exceptions import ReferentialIntegrityError

logger = logging.getLogger(__name__)

def join_by_key(left, right, key, operation, left_name, right_name):
    """
    Hash join each left row to the single right row sharing its key.

    Raises ReferentialIntegrityError on the first left key with no match.
    """
    joined = pd.merge(
        left,
        right,
        on=key,
        how='left',
        validate='many_to_one',
        indicator=True
    )

    dangling = joined[joined['_merge'] == 'left_only']
    if len(dangling) > 0:
        logger.error(
            f"{operation}: {len(dangling)} rows in {left_name}.{key} have no matching {right_name}.{key}"
        )
        raise ReferentialIntegrityError(
            f"{left_name}.{key} references a missing {right_name} row",
            operation=operation,
            table=left_name,
            key=dangling[key].iloc[0],
        )

    return joined.drop(columns='_merge')

def join_line_items(relations, operation):
    """
    Join order details with pizzas, pizza types and orders.

    Adds the per line item revenue (price x quantity).
    """
    logger.debug(f"{operation}: joining order_details, pizzas, pizza_types and orders")

    line_items = join_by_key(
        relations.order_details, relations.pizzas, 'pizza_id',
        operation, 'order_details', 'pizzas'
    )
    line_items = join_by_key(
        line_items, relations.pizza_types, 'pizza_type_id',
        operation, 'pizzas', 'pizza_types'
    )
    line_items = join_by_key(
        line_items, relations.orders, 'order_id',
        operation, 'order_details', 'orders'
    )

    # Calculate revenue per line item
    line_items['revenue'] = line_items['price'] * line_items['quantity']

    return line_items

def join_catalog(relations, operation):
    """
    Join every pizza variant with its pizza type.
    """
    return join_by_key(
        relations.pizzas, relations.pizza_types, 'pizza_type_id',
        operation, 'pizzas', 'pizza_types'
    )

def check_for_missing_relationships(relations):
    """
    Check for missing relationships between the relations.
    """
    try:
        # Check for line items with no corresponding order
        order_ids_in_orders = set(relations.orders['order_id'])
        order_ids_in_details = set(relations.order_details['order_id'])
        orphaned_details = order_ids_in_details - order_ids_in_orders

        # Check for line items with no corresponding pizza
        pizza_ids_in_menu = set(relations.pizzas['pizza_id'])
        pizza_ids_in_details = set(relations.order_details['pizza_id'])
        unknown_pizzas = pizza_ids_in_details - pizza_ids_in_menu

        # Check for orders with no line items
        orders_with_no_items = order_ids_in_orders - order_ids_in_details

        # Check for pizzas that have never been ordered
        unused_pizzas = pizza_ids_in_menu - pizza_ids_in_details

        results = {
            'orphaned_details_count': len(orphaned_details),
            'orphaned_details': sorted(orphaned_details, key=str)[:10],  # Limit to first 10 for logging purpose
            'unknown_pizzas_count': len(unknown_pizzas),
            'unknown_pizzas': sorted(unknown_pizzas, key=str)[:10],
            'orders_with_no_items_count': len(orders_with_no_items),
            'orders_with_no_items': sorted(orders_with_no_items, key=str)[:10],
            'unused_pizzas_count': len(unused_pizzas),
            'unused_pizzas': sorted(unused_pizzas, key=str)[:10]
        }

        # Log the issues found
        if results['orphaned_details_count'] > 0:
            logger.warning(f"Found {results['orphaned_details_count']} order ids in order_details with no corresponding order")

        if results['unknown_pizzas_count'] > 0:
            logger.warning(f"Found {results['unknown_pizzas_count']} order_details rows with unknown pizzas")

        if results['orders_with_no_items_count'] > 0:
            logger.warning(f"Found {results['orders_with_no_items_count']} orders with no line items")

        if results['unused_pizzas_count'] > 0:
            logger.info(f"Found {results['unused_pizzas_count']} pizzas that have never been ordered")

        return results

    except Exception as e:
        logger.error(f"Error checking for missing relationships: {str(e)}")
        logger.error(traceback.format_exc())
        raise

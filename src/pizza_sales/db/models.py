"""
Database models for the pizza sales dataset.
"""
from sqlalchemy import Column, Integer, String, Float, Date, Time, Text, ForeignKey
from sqlalchemy.orm import declarative_base

Base = declarative_base()

class PizzaType(Base):
    """Catalog of pizza types."""
    __tablename__ = 'pizza_types'

    pizza_type_id = Column(String(50), primary_key=True)
    name = Column(String(100), nullable=False)
    category = Column(String(50), nullable=False)
    ingredients = Column(Text)

class Pizza(Base):
    """Sized and priced variant of a pizza type."""
    __tablename__ = 'pizzas'

    pizza_id = Column(String(50), primary_key=True)
    pizza_type_id = Column(String(50), ForeignKey('pizza_types.pizza_type_id'), nullable=False)
    size = Column(String(10), nullable=False)
    price = Column(Float, nullable=False)

class Order(Base):
    """One placed order."""
    __tablename__ = 'orders'

    order_id = Column(Integer, primary_key=True, autoincrement=False)
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)

class OrderDetail(Base):
    """Line item linking an order to a pizza variant."""
    __tablename__ = 'order_details'

    order_details_id = Column(Integer, primary_key=True, autoincrement=False)
    order_id = Column(Integer, ForeignKey('orders.order_id'), nullable=False)
    pizza_id = Column(String(50), ForeignKey('pizzas.pizza_id'), nullable=False)
    quantity = Column(Integer, nullable=False)

# Insert order respecting foreign keys
TABLES = ['pizza_types', 'pizzas', 'orders', 'order_details']

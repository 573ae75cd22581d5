"""
SQLAlchemy Database Models

Customers, restaurants, their menus, and the orders placed against them.
Table names follow the existing deployment (``tbl_*``).
"""

from sqlalchemy import Column, Integer, String, Numeric, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ordering_api.database import Base


class Customer(Base):
    """
    Registered customer.

    ``password`` holds the bcrypt hash, never the plaintext.
    """
    __tablename__ = "tbl_customers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    fullname = Column(String(100), nullable=False)
    address = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    email = Column(String(255), nullable=False)

    # Credentials
    username = Column(String(50), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    orders = relationship("Order", back_populates="customer")

    def __repr__(self):
        return f"<Customer #{self.id} - {self.username}>"


class Restaurant(Base):
    """Reference data joined into menu listings."""
    __tablename__ = "tbl_restaurants"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    restaurant_name = Column(String(100), nullable=False)
    address = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    menu_description = Column(Text, nullable=True)

    menus = relationship("MenuItem", back_populates="restaurant")

    def __repr__(self):
        return f"<Restaurant #{self.id} - {self.restaurant_name}>"


class MenuItem(Base):
    __tablename__ = "tbl_menus"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    restaurant_id = Column(Integer, ForeignKey("tbl_restaurants.id"), nullable=False, index=True)
    menu_name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String(50), nullable=True)

    restaurant = relationship("Restaurant", back_populates="menus")

    def __repr__(self):
        return f"<MenuItem #{self.id} - {self.menu_name} - {self.price}>"


class Order(Base):
    """
    A single-item order.

    ``price`` and ``total`` are captured when the order is placed and are
    never recomputed from the menu afterwards.
    """
    __tablename__ = "tbl_orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    customer_id = Column(Integer, ForeignKey("tbl_customers.id"), nullable=False, index=True)
    restaurant_id = Column(Integer, ForeignKey("tbl_restaurants.id"), nullable=False)
    menu_id = Column(Integer, ForeignKey("tbl_menus.id"), nullable=False)

    # =========================================================================
    # PRICING
    # =========================================================================
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)  # unit price at order time
    total = Column(Numeric(12, 2), nullable=False)

    order_status = Column(String(30), nullable=False, default="Processing")

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    customer = relationship("Customer", back_populates="orders")

    def __repr__(self):
        return f"<Order #{self.id} - customer {self.customer_id} - {self.total} - {self.order_status}>"

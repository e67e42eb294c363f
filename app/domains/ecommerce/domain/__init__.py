"""
E-commerce Domain Layer

Domain-Driven Design implementation for the store's bounded context.

This module contains:
- Entities: Product, Order, Coupon, Review, Cart
- Value Objects: statuses, reasons, shipping configuration and address
- Domain Services: coupon evaluation, order totals, stock ledger,
  order numbering and the order lifecycle
- Events: side effects returned by order transitions
"""

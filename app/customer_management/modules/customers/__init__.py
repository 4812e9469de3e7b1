"""
Customers module.

- Customers CRUD over a single `customers` table (JSON API)
- NIC number is the unique business key
"""

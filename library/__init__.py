"""
Reading list core package.

This package contains:
- Book record models and the genre enumeration
- In-memory record store with id allocation
- Field validators for create/update payloads
- Query engine for filtering the collection
- Aggregator for reading statistics
- Book service composing validation and store mutations
"""

__version__ = "1.0.0"

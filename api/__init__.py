"""
FastAPI REST API for the reading list.

This module provides:
- Book listing, lookup and filtering
- Create, replace and delete of book records
- Read-status and rating updates
- Reading statistics
"""

# Infrastructure layer - database access
"""
Infrastructure layer contains:
- Database repositories

This layer knows about SQL; services above it do not.
"""

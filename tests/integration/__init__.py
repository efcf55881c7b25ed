# Integration Tests
"""
Integration tests verify complete user workflows through the HTTP API,
starting from the seeded two-user, three-task scenario.
"""

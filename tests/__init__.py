# Task Manager Test Suite
"""
Test suite for Task Manager.

Key principle: test behaviour through the HTTP API, and test services
in isolation with mocked repositories.
"""

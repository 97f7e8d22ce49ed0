"""
Test suite for nameledger

Contains:
- tests/unit/          : Unit tests for stores, models, contracts and the service
"""

"""
Shared utilities: console/logging setup and CST rendering helpers.
"""

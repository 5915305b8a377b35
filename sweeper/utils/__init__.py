"""
Retention Sweeper - Utils Package
=================================

Stateless helpers: duration parsing/formatting and error reporting.
"""

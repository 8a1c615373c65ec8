"""Routing: route key parsing and a compiled, first-match route table.

Routes are registered during setup and compiled into an immutable
table when the mock is built.
"""

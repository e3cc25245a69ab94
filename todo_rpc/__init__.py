"""
Todo RPC package.

A FastAPI service exposing createTodo, getTodos, updateTodo, and deleteTodo
as remote procedures over a SQLite table, plus an async client and a
list view/controller that consumes them.
"""

__version__ = "0.1.0"

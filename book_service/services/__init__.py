"""
Services Package

Business logic, separate from HTTP handling (routers) and from storage
(store/). Services are constructed with the store they use.

Current services:
- books.py: BookService, book CRUD and search over a BookStore
- stock.py: StockService, stock records and the no-negative-stock rule
- users.py: UserServiceClient, the remote permission gate
"""

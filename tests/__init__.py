"""
Test Suite for Book Service

Test Organization:
- conftest.py: Shared fixtures (stores per backend, gate, client, sample data)
- test_locks.py: RWLock
- test_book_store.py / test_stock_store.py: store contracts, both backends
- test_book_service.py / test_stock_service.py: services and error wrapping
- test_permissions.py: bitmask and the static gate
- test_user_client.py: remote permission gate against a mock transport
- test_books.py / test_stock.py: HTTP endpoints
- test_gate.py: permission-gated mutations over HTTP
- test_config.py: settings validation

Running Tests:
    pytest
    pytest --cov-report=html
    pytest tests/test_books.py -v
"""

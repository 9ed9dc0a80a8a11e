"""Cache interface, in-memory and Redis stores, example services and WSGI middleware."""
"""Wire payload builders.

These modules turn chat values into the JSON shapes clients receive. They
must not define Socket.IO server instances or connection handlers.
"""

"""Realtime infrastructure (Socket.IO).

Holds the process-wide Socket.IO server and the wire payload builders shared
by the chat service.
"""

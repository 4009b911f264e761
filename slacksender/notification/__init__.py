"""Notification delivery package.

Queues ``Notification`` values in a bounded in-process buffer and relays
them to an incoming-webhook endpoint from a single background worker.
Delivery failures are logged and never raised to the caller.
"""

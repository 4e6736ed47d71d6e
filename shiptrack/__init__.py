"""Shipment tracking site package root.

Public pages, the admin image-management suite and thin clients for the
media host and the shipment API. Build the WSGI app with
``shiptrack.startup.wiring.create_app``.
"""

"""Service exports."""

from .shipments_api import (
    Shipment,
    ShipmentImage,
    ShipmentNotFoundError,
    ShipmentUnavailableError,
    load_shipment,
)
from .media_host import MediaAsset
from . import image_removal, image_upload, media_host, shipments_api

__all__ = [
    "Shipment",
    "ShipmentImage",
    "ShipmentNotFoundError",
    "ShipmentUnavailableError",
    "MediaAsset",
    "load_shipment",
    "image_removal",
    "image_upload",
    "media_host",
    "shipments_api",
]

"""Device abstraction: traversal contract plus the built-in devices."""

from svgir.device.base import Device, DrawOp, OpKind, VisitingDevice, visit
from svgir.device.recording import RecordingDevice
from svgir.device.svg_device import SvgDevice

__all__ = ["Device", "DrawOp", "OpKind", "RecordingDevice", "SvgDevice", "VisitingDevice", "visit"]

"""
schema.statuses - Fixed vocabularies for parts, orders and users.

Part statuses form a suggested workflow (designing → … → done) but
membership is the only rule; any status may follow any other.
"""

from __future__ import annotations

PART_TYPES = ("part", "assembly")

# Ordered: this is the display order on dashboards
PART_STATUS_MAP: dict[str, str] = {
    "designing":     "Design in progress",
    "material":      "Material needs to be ordered",
    "ordered":       "Waiting for materials",
    "drawing":       "Needs drawing",
    "ready":         "Ready to manufacture",
    "cnc":           "Ready for CNC",
    "laser":         "Ready for laser",
    "lathe":         "Ready for lathe",
    "mill":          "Ready for mill",
    "printer":       "Ready for 3D printer",
    "router":        "Ready for router",
    "manufacturing": "Manufacturing in progress",
    "outsourced":    "Waiting for outsourced manufacturing",
    "welding":       "Waiting for welding",
    "scotchbrite":   "Waiting for Scotch-Brite",
    "anodize":       "Ready for anodize",
    "powder":        "Ready for powder coating",
    "coating":       "Waiting for coating",
    "assembly":      "Waiting for assembly",
    "done":          "Done",
}

PART_STATUSES = tuple(PART_STATUS_MAP)
DEFAULT_PART_STATUS = "designing"
DONE_STATUS = "done"

PART_PRIORITY_MAP: dict[int, str] = {
    0: "High",
    1: "Normal",
    2: "Low",
}
DEFAULT_PRIORITY = 1

ORDER_STATUSES = ("open", "ordered", "received")
OPEN_ORDER_STATUS = "open"

PERMISSIONS = ("readonly", "editor", "admin")


def is_part_status(value) -> bool:
    return isinstance(value, str) and value in PART_STATUS_MAP


def is_order_status(value) -> bool:
    return isinstance(value, str) and value in ORDER_STATUSES


def is_priority(value) -> bool:
    # bool is an int subclass; True/False are not priorities
    return isinstance(value, int) and not isinstance(value, bool) \
        and value in PART_PRIORITY_MAP

"""Home Assistant-bound helper functions for Pet Progress.

NOTE: Functions that need `hass` (or Home Assistant types) belong here,
NOT in utils/.

Submodules:
    - entity_helpers: Signal names, config entry / coordinator lookup
    - device_helpers: DeviceInfo construction
    - deeplink_helpers: Deep-link URL parsing
"""

"""
Core modules for genbridge.

This package contains the core business logic for:
- Settings (timeouts, polling, output locations)
- Request building and response parsing per provider family
- The generation client and video job polling
- Media download and source image encoding
"""

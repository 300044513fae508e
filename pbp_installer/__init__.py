"""Pinebook Pro Arch Linux installer (state-driven).

Core design goals:
- Ordered stages with recorded completion for re-entry
- Every operation is a logged external command
- Fixed Rockchip boot geometry (SPL/TPL at raw sectors)
- Full-disk encryption with a persisted key file
"""

__all__ = []

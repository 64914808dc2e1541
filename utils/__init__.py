"""Shared helpers."""

from utils.timezone import now_utc

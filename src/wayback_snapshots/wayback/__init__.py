"""Wayback Machine CDX index and snapshot playback access.

No credentials are required.  The CDX API rate-limits by IP and answers
HTTP 429 when pressed; the Internet Archive's infrastructure can be slow,
so requests carry a generous timeout.
"""

"""
ZinaSite: content data access for a small organization's website.

Articles and events are read and managed through zinasite.data, which talks
either to the hosted backend directly or to the local gateway (zinasite.main).
"""

__version__ = "1.0.0"

"""Core domain package for layoutfix.

Core contains layout remapping, vocabulary matching, mismatch scoring and the
update polling protocol without any Telegram or storage-specific code, keeping
the business logic portable.
"""

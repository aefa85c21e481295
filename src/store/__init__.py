"""Output storage layer.

This package commits manipulated texts into output records, builds binary
attachments and serializes records to and from JSON lines.
"""

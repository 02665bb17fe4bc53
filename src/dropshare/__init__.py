"""DropShare: upload queue, file catalog and expiring share links."""

__version__ = "0.1.0"

"""dirserve: browse, read, rename and delete files of one directory tree over HTTP."""

__version__ = "0.1.0"

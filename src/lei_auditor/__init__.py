"""Report auditor for Lei do Bem R&D documentation."""

__version__ = "0.1.0"

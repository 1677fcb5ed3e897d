"""Directory listing models, normalization, and the file manager state machine.

Import ``FileManager`` from ``peanutfm.files.manager``; this package stays
import-light because the API client depends on its models.
"""

"""SheetCraft - AI-assisted spreadsheet generation and editing."""

__version__ = "0.1.0"

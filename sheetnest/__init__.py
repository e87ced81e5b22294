"""SheetNest - 2D nesting of flat parts onto rectangular stock sheets."""

__version__ = "0.1.0"

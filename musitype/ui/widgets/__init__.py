from musitype.ui.widgets.typing_area import TypingArea

__all__ = ["TypingArea"]

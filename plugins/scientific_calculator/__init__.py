"""Scientific Calculator plugin manifest."""

manifest = {
    "title": "Scientific Calculator",
    "summary": "Keypad-driven calculator sessions with DEG/RAD trigonometry, SHIFT/HYP modifiers, Ans and a 20-entry tape.",
    "category": "Engineering Utilities",
    "blueprint": "scientific_calculator",
    "api": "/api/scientific_calculator",
}

__all__ = ["manifest"]

"""
Keyboard mapping for GlassCalc
Translates key names into calculator commands
"""

APPEND_KEYS = "0123456789+-*/.()"

KEY_COMMANDS = {
    "Enter": "calculate",
    "Return": "calculate",
    "=": "calculate",
    "Backspace": "backspace",
    "BackSpace": "backspace",
    "Escape": "clear_all",
    "c": "clear_all",
    "Delete": "clear_entry",
    "r": "square_root",
    "R": "square_root",
    "p": "percentage",
    "P": "percentage",
    "s": "square",
    "S": "square",
    "f": "factorial",
    "F": "factorial",
    "i": "reciprocal",
    "I": "reciprocal",
    "t": "toggle_sign",
    "T": "toggle_sign",
}

# Tk keysyms for keys whose event.char is not the symbol itself
TK_KEYSYMS = {
    "KP_Enter": "Enter",
    "KP_Add": "+",
    "KP_Subtract": "-",
    "KP_Multiply": "*",
    "KP_Divide": "/",
    "KP_Decimal": ".",
}


def command_for_key(key):
    """Return ``(command, token)`` for a key name, or None if it is unmapped"""
    if not isinstance(key, str) or not key:
        return None
    key = TK_KEYSYMS.get(key, key)
    if len(key) == 1 and key in APPEND_KEYS:
        return ("append", key)
    command = KEY_COMMANDS.get(key)
    if command is None:
        return None
    return (command, None)


def handle_key(calculator, key):
    """Dispatch a key press to the calculator. Returns False if the key is unmapped."""
    mapping = command_for_key(key)
    if mapping is None:
        return False
    command, token = mapping
    calculator.dispatch(command, token)
    return True

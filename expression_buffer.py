"""
Expression Buffer for GlassCalc
Holds the in-progress expression text and the token insertion rules
"""

OPERATORS = "+-*/"


def is_operator(char):
    return isinstance(char, str) and len(char) == 1 and char in OPERATORS


class ExpressionBuffer:
    def __init__(self, text=""):
        self.text = text

    def append(self, token):
        """Append a digit, operator, parenthesis or decimal point.

        A new operator replaces a trailing operator ("3+" then "-" gives "3-"),
        and a second consecutive decimal point is dropped. Anything other than
        a single character is ignored.
        """
        if not isinstance(token, str) or len(token) != 1:
            return self.text
        last_char = self.text[-1:]

        if is_operator(token) and is_operator(last_char):
            self.text = self.text[:-1] + token
        elif token == "." and last_char == ".":
            return self.text
        else:
            self.text += token
        return self.text

    def insert_constant(self, value):
        """Append a constant's decimal expansion, multiplying if it follows a value"""
        last_char = self.text[-1:]
        if last_char and last_char in "0123456789)":
            self.text += "*"
        self.text += value
        return self.text

    def backspace(self):
        """Remove the last character"""
        self.text = self.text[:-1]
        return self.text

    def clear(self):
        """Clear the expression"""
        self.text = ""
        return self.text

    def set(self, text):
        """Replace the expression, e.g. with a formatted result"""
        self.text = text
        return self.text

    def read(self):
        return self.text

    def __len__(self):
        return len(self.text)

    def __repr__(self):
        return f"ExpressionBuffer({self.text!r})"

"""
GUI for GlassCalc
Tkinter front-end that renders the calculator's display state
"""
import tkinter as tk

import config
import keymap
from calculator import Calculator, DisplayMode
from logging_config import get_logger

logger = get_logger("gui")

# (label, command, token, kind)
FUNCTION_ROW = [
    ("√", "square_root", None, "function"),
    ("x²", "square", None, "function"),
    ("1/x", "reciprocal", None, "function"),
    ("n!", "factorial", None, "function"),
    ("%", "percentage", None, "function"),
]

MEMORY_ROW = [
    ("MC", "memory_clear", None, "memory"),
    ("MR", "memory_recall", None, "memory"),
    ("M+", "memory_add", None, "memory"),
    ("M-", "memory_subtract", None, "memory"),
    ("π", "pi", None, "memory"),
]

KEYPAD = [
    [("C", "clear_all", None, "clear"), ("CE", "clear_entry", None, "clear"),
     ("⌫", "backspace", None, "clear"), ("/", "append", "/", "operator")],
    [("7", "append", "7", "normal"), ("8", "append", "8", "normal"),
     ("9", "append", "9", "normal"), ("*", "append", "*", "operator")],
    [("4", "append", "4", "normal"), ("5", "append", "5", "normal"),
     ("6", "append", "6", "normal"), ("-", "append", "-", "operator")],
    [("1", "append", "1", "normal"), ("2", "append", "2", "normal"),
     ("3", "append", "3", "normal"), ("+", "append", "+", "operator")],
    [("(", "append", "(", "operator"), ("0", "append", "0", "normal"),
     (")", "append", ")", "operator"), (".", "append", ".", "normal")],
    [("±", "toggle_sign", None, "function"), ("=", "calculate", None, "equals")],
]


class GlassCalcGUI:
    def __init__(self, root, calculator=None, theme="default"):
        self.root = root
        self.root.title(config.APP_NAME)
        self.root.geometry(f"{config.WINDOW_WIDTH}x{config.WINDOW_HEIGHT}")

        self.calculator = calculator or Calculator()
        self.theme = theme
        self._pending_flashes = 0
        self.T: dict = config.get_theme(theme)
        self.root.configure(bg=self.T["bg"])

        self.create_widgets()
        self.calculator.subscribe(self.render)
        self.root.bind("<Key>", self.on_key_press)

    # ── Theme helpers ──────────────────────────────────────────────────────────
    def set_theme(self, name):
        """Switch palette and rebuild all widgets"""
        self.theme = name
        self.T = config.get_theme(name)
        self.root.configure(bg=self.T["bg"])
        for w in self.root.winfo_children():
            w.destroy()
        self.create_widgets()
        logger.debug("Theme set to %s", name)

    def _btn(self, parent, text, command, kind="normal"):
        """Create a flat button styled for the active palette."""
        T = self.T
        if kind == "equals":
            bg, fg = T["equals_bg"], T["equals_fg"]
        elif kind == "operator":
            bg, fg = T["btn_bg"], T["operator_fg"]
        elif kind == "function":
            bg, fg = T["function_bg"], T["btn_fg"]
        elif kind == "memory":
            bg, fg = T["memory_bg"], T["btn_fg"]
        elif kind == "clear":
            bg, fg = T["clear_bg"], "#FFFFFF"
        else:
            bg, fg = T["btn_bg"], T["btn_fg"]
        return tk.Button(
            parent, text=text, command=command,
            font=config.BUTTON_FONT,
            bg=bg, fg=fg,
            activebackground=T["bg"], activeforeground=fg,
            relief=tk.FLAT, bd=0, cursor="hand2",
        )

    def create_widgets(self):
        """Create display, theme bar and keypad"""
        T = self.T

        theme_bar = tk.Frame(self.root, bg=T["bg"])
        theme_bar.pack(fill=tk.X, padx=6, pady=(6, 0))
        for name in config.THEMES:
            tk.Button(
                theme_bar, text=name.title(),
                font=config.LABEL_FONT,
                bg=T["equals_bg"] if name == self.theme else T["btn_bg"],
                fg=T["equals_fg"] if name == self.theme else T["btn_fg"],
                relief=tk.FLAT, bd=0, cursor="hand2",
                command=lambda n=name: self.set_theme(n),
            ).pack(side=tk.LEFT, padx=2)

        display_frame = tk.Frame(self.root, bg=T["display_bg"])
        display_frame.pack(fill=tk.X, padx=6, pady=6)

        self.memory_indicator = tk.Label(
            display_frame, text="M",
            font=(config.LABEL_FONT[0], 9, "bold"),
            bg=T["indicator_bg"], fg="#FFFFFF", width=2,
        )

        self.display = tk.Label(
            display_frame, text="",
            font=config.DISPLAY_FONT,
            bg=T["display_bg"], fg=T["display_fg"],
            anchor=tk.E, padx=12, pady=10,
        )
        self.display.pack(side=tk.RIGHT, fill=tk.X, expand=True)

        keypad = tk.Frame(self.root, bg=T["bg"])
        keypad.pack(fill=tk.BOTH, expand=True, padx=6, pady=(0, 6))

        rows = [MEMORY_ROW, FUNCTION_ROW] + KEYPAD
        for r, row in enumerate(rows):
            keypad.rowconfigure(r, weight=1)
            span = 20 // len(row)
            for c, (label, command, token, kind) in enumerate(row):
                button = self._btn(keypad, label, lambda cmd=command, tok=token: self.press(cmd, tok), kind)
                # "=" fills the rest of the last row
                colspan = 20 - span * c if c == len(row) - 1 else span
                button.grid(row=r, column=c * span, columnspan=colspan, sticky="nsew", padx=2, pady=2)
        for c in range(20):
            keypad.columnconfigure(c, weight=1)

        self.render(self.calculator.display_state())

    # ── Calculator interaction ──────────────────────────────────────────────
    def press(self, command, token=None):
        self.calculator.dispatch(command, token)

    def on_key_press(self, event):
        """Handle keyboard input"""
        # Enter, Backspace, Escape etc. have control chars; fall back to keysym
        key = event.char if event.char and event.char.isprintable() else event.keysym
        keymap.handle_key(self.calculator, key)

    def render(self, state):
        """Update the display from a DisplayState"""
        T = self.T
        if state.expiry_ms:
            self._pending_flashes += 1
            self.root.after(state.expiry_ms, self._revert_colour)

        # a repeat of a flash mode without expiry only keeps an unexpired flash
        if state.mode == DisplayMode.NORMAL or not self._pending_flashes:
            fg = T["display_fg"]
        elif state.mode == DisplayMode.SUCCESS:
            fg = T["success"]
        else:
            fg = T["danger"]
        self.display.config(text=state.text, fg=fg)

        if state.memory_active:
            self.memory_indicator.pack(side=tk.LEFT, padx=6)
        else:
            self.memory_indicator.pack_forget()

    def _revert_colour(self):
        self._pending_flashes = max(0, self._pending_flashes - 1)
        if self.display.winfo_exists():
            self.display.config(fg=self.T["display_fg"])

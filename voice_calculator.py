import queue
import sys
import threading

import pyttsx3                        # Offline text-to-speech for reading voice results back
import tkinter as tk                  # Standard Python GUI toolkit
from tkinter import ttk

from calculator_config import SPEAK_RESULTS, TTS_RATE, VOSK_MODEL_PATH
from calculator_state import Calculator
from history_log import EMPTY_HISTORY_MESSAGE
from speech_session import SpeechCapabilityError, VoiceSession

# ============================================================
# ====================== GLOBAL STATE ========================
# ============================================================

# The calculator and the voice controller (created in main())
calculator: Calculator | None = None
session: VoiceSession | None = None

# Text-to-speech engine; stays None when read-back is off or unavailable
engine = None
engine_lock = threading.Lock()

# Speech events arrive on the recognizer's worker thread and are handed to
# the Tk thread through this queue (Tkinter and the calculator are single-threaded)
gui_queue: "queue.Queue[dict]" = queue.Queue()

# Widget references (initialized in main())
root: tk.Tk | None = None
display_label: ttk.Label | None = None
pending_label: ttk.Label | None = None
status_label: ttk.Label | None = None
mic_button: ttk.Button | None = None
clear_button: ttk.Button | None = None
angle_button: ttk.Button | None = None
history_list: tk.Listbox | None = None

# Rows of the keypad: (label, command name, argument, style)
KEYPAD = [
    [("sin", "trig", "sin", "Fn"), ("cos", "trig", "cos", "Fn"),
     ("tan", "trig", "tan", "Fn"), ("RAD", "angle", None, "Fn")],
    [("√", "sqrt", None, "Fn"), ("x²", "square", None, "Fn"),
     ("xʸ", "op", "^", "Fn"), ("÷", "op", "/", "Op")],
    [("AC", "clear", None, "Light"), ("+/-", "sign", None, "Light"),
     ("%", "percent", None, "Light"), ("×", "op", "*", "Op")],
    [("7", "digit", "7", "Digit"), ("8", "digit", "8", "Digit"),
     ("9", "digit", "9", "Digit"), ("-", "op", "-", "Op")],
    [("4", "digit", "4", "Digit"), ("5", "digit", "5", "Digit"),
     ("6", "digit", "6", "Digit"), ("+", "op", "+", "Op")],
    [("1", "digit", "1", "Digit"), ("2", "digit", "2", "Digit"),
     ("3", "digit", "3", "Digit"), ("=", "equals", None, "Op")],
    [("0", "digit", "0", "Digit"), (".", "decimal", None, "Digit")],
]

# ============================================================
# ====================== SPEECH WIRING =======================
# ============================================================


def speak(text: str):
    """Read text aloud on a background thread so the GUI never blocks."""
    print(f"[ASSISTANT]: {text}")
    if engine is None:
        return

    def run():
        with engine_lock:
            engine.say(text)
            engine.runAndWait()

    threading.Thread(target=run, daemon=True).start()


def attach_capability(capability):
    """Route capability callbacks (worker thread) into the GUI queue."""
    capability.on_start = lambda: gui_queue.put({"type": "start"})
    capability.on_result = lambda text: gui_queue.put({"type": "result", "text": text})
    capability.on_error = lambda code: gui_queue.put({"type": "error", "code": code})
    capability.on_end = lambda: gui_queue.put({"type": "end"})


def load_capability():
    """
    Build the offline speech capability, or return None if this machine
    cannot do speech (missing audio library, model folder or microphone).
    """
    print("Loading Vosk model from:", VOSK_MODEL_PATH)
    try:
        # sounddevice raises OSError at import time when PortAudio is missing
        from vosk_speech import load_speech_capability
        capability = load_speech_capability(VOSK_MODEL_PATH)
    except (OSError, SpeechCapabilityError) as e:
        print(f"[SPEECH DISABLED]: {e}")
        return None

    print("Model loaded.")
    attach_capability(capability)
    return capability


def init_tts():
    global engine
    if not SPEAK_RESULTS:
        return

    try:
        engine = pyttsx3.init()
        engine.setProperty("rate", TTS_RATE)
    except (OSError, RuntimeError) as e:
        print(f"[TTS DISABLED]: {e}")
        engine = None


def process_gui_queue():
    """
    Handle every queued speech event on the Tk thread, then reschedule.
    """
    try:
        while True:
            event = gui_queue.get_nowait()
            etype = event.get("type")

            if etype == "start":
                session.on_start()
            elif etype == "result":
                session.on_result(event.get("text", ""))
            elif etype == "error":
                session.on_error(event.get("code", ""))
            elif etype == "end":
                session.on_end()

            refresh_status()

    except queue.Empty:
        pass

    if root is not None:
        root.after(100, process_gui_queue)

# ============================================================
# ======================= GUI HELPERS ========================
# ============================================================


def refresh_display(display_value: str, history: list[str]):
    """Calculator change listener: redraw display, labels and history."""
    if display_label is not None:
        size = 28 if len(display_value) > 9 else 44
        display_label.config(text=display_value, font=("Segoe UI", size))

    if pending_label is not None:
        pending_label.config(text=calculator.pending_expression)

    if clear_button is not None:
        clear_button.config(text=calculator.clear_label)

    if angle_button is not None:
        angle_button.config(text=calculator.angle_mode.label)

    if history_list is not None:
        history_list.delete(0, "end")
        for entry in history:
            history_list.insert("end", entry)

        if not history:
            # placeholder row; recall() ignores it since it has no " = "
            history_list.insert("end", EMPTY_HISTORY_MESSAGE)
            history_list.itemconfig(0, foreground="#9ca3af")


def refresh_status():
    if status_label is not None:
        status_label.config(text=session.status_text)

    if mic_button is not None:
        mic_button.config(text="Listening..." if session.listening else "🎤 Speak")


def on_listen():
    session.listen()
    refresh_status()


def on_history_recall(event=None):
    if history_list is None:
        return

    selection = history_list.curselection()
    if not selection:
        return

    calculator.recall(history_list.get(selection[0]))


def press(command: str, arg=None):
    """Dispatch a keypad button to the calculator."""
    if command == "digit":
        calculator.input_digit(arg)
    elif command == "decimal":
        calculator.input_decimal()
    elif command == "op":
        calculator.perform_operation(arg)
    elif command == "equals":
        calculator.handle_equals()
    elif command == "clear":
        calculator.clear_all()
    elif command == "sign":
        calculator.toggle_sign()
    elif command == "percent":
        calculator.percent()
    elif command == "sqrt":
        calculator.square_root()
    elif command == "square":
        calculator.square()
    elif command == "trig":
        calculator.handle_trig(arg)
    elif command == "angle":
        calculator.toggle_angle_mode()


def on_key(event):
    key = event.char
    if event.keysym == "Escape":
        press("clear")
    elif not key or event.widget is history_list:
        return
    elif key.isdigit():
        press("digit", key)
    elif key == ".":
        press("decimal")
    elif key in "+-*/^":
        press("op", key)
    elif key in ("=", "\r"):
        press("equals")


def build_keypad(parent):
    global clear_button, angle_button

    for r, row in enumerate(KEYPAD):
        column = 0
        for label, command, arg, style in row:
            button = ttk.Button(
                parent,
                text=label,
                style=f"{style}.TButton",
                command=lambda command=command, arg=arg: press(command, arg),
            )
            # the "0" key spans two columns
            span = 2 if label == "0" else 1
            button.grid(row=r, column=column, columnspan=span, sticky="nsew", padx=3, pady=3)
            column += span

            if command == "clear":
                clear_button = button
            elif command == "angle":
                angle_button = button

    # "=" is the last key of its row; stretch it over the bottom row too
    for child in parent.grid_slaves(row=5, column=3):
        child.grid(rowspan=2)

    for c in range(4):
        parent.columnconfigure(c, weight=1, uniform="keys")
    for r in range(len(KEYPAD)):
        parent.rowconfigure(r, weight=1, uniform="keys")


def cleanup():
    print("[CLEANUP] Stopping speech and closing.")

    capability = session.capability if session is not None else None
    if capability is not None and hasattr(capability, "stop"):
        capability.stop()

    if engine is not None:
        with engine_lock:
            engine.stop()

    if root is not None:
        root.destroy()

# ============================================================
# ================== MAIN ENTRY / GUI SETUP ==================
# ============================================================


def main():
    """
    Application entry point.

    1. Load the speech capability (voice input is disabled if that fails).
    2. Initialize text-to-speech read-back.
    3. Build the window: status line, display, keypad, history list.
    4. Start polling the speech event queue and enter the Tk mainloop.
    """
    global calculator, session, root, display_label, pending_label, status_label, mic_button, history_list

    calculator = Calculator()
    capability = load_capability()
    init_tts()
    session = VoiceSession(calculator, capability, announce=speak)

    root = tk.Tk()
    root.title("Voice Calculator")
    root.geometry("420x760")
    root.minsize(360, 640)

    style = ttk.Style(root)
    style.configure("Digit.TButton", font=("Segoe UI", 16))
    style.configure("Op.TButton", font=("Segoe UI", 16, "bold"))
    style.configure("Light.TButton", font=("Segoe UI", 14))
    style.configure("Fn.TButton", font=("Segoe UI", 12))

    main_frame = ttk.Frame(root, padding=14)
    main_frame.pack(fill="both", expand=True)

    # Top bar: microphone button
    top_bar = ttk.Frame(main_frame)
    top_bar.pack(fill="x")
    mic_button = ttk.Button(top_bar, text="🎤 Speak", command=on_listen)
    mic_button.pack(side="left")
    if not session.available:
        mic_button.state(["disabled"])

    # Listening indicator / speech diagnostics
    status_label = ttk.Label(main_frame, text="", foreground="#6b7280", anchor="center")
    status_label.pack(fill="x", pady=(6, 0))

    # Stored operand and operator while a calculation is pending ("3 +")
    pending_label = ttk.Label(main_frame, text="", anchor="e", foreground="#6b7280", font=("Segoe UI", 12))
    pending_label.pack(fill="x")

    display_label = ttk.Label(main_frame, text="0", anchor="e", font=("Segoe UI", 44))
    display_label.pack(fill="x", pady=(4, 10))

    keypad = ttk.Frame(main_frame)
    keypad.pack(fill="both", expand=True)
    build_keypad(keypad)

    ttk.Separator(main_frame, orient="horizontal").pack(fill="x", pady=(10, 5))

    history_header = ttk.Frame(main_frame)
    history_header.pack(fill="x")
    ttk.Label(history_header, text="History", font=("Segoe UI", 11, "bold")).pack(side="left")
    ttk.Button(history_header, text="Clear History", command=lambda: calculator.clear_history()).pack(side="right")

    history_frame = ttk.Frame(main_frame)
    history_frame.pack(fill="both", expand=False, pady=(5, 0))

    history_list = tk.Listbox(history_frame, height=6, font=("Courier New", 10), activestyle="none")
    history_list.pack(side="left", fill="both", expand=True)
    history_list.bind("<Double-Button-1>", on_history_recall)
    history_list.bind("<Return>", on_history_recall)

    scrollbar = ttk.Scrollbar(history_frame, command=history_list.yview)
    scrollbar.pack(side="right", fill="y")
    history_list.config(yscrollcommand=scrollbar.set)

    calculator.subscribe(refresh_display)
    refresh_display(calculator.display_value, calculator.history)
    refresh_status()

    root.bind("<Key>", on_key)
    root.after(100, process_gui_queue)
    root.protocol("WM_DELETE_WINDOW", cleanup)
    root.mainloop()


if __name__ == "__main__":
    sys.exit(main())

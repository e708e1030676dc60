"""
client/debounce.py
Entprellt Eingaben: der Callback läuft erst, wenn seit der letzten Eingabe `delay` Sekunden vergangen sind.
Debounces input: the callback runs only once `delay` seconds have passed since the last input.
"""

import time

DEFAULT_DELAY = 0.3


class Debouncer:

    def __init__(self, callback, delay: float = DEFAULT_DELAY, clock=time.monotonic):
        self.callback = callback
        self.delay = delay
        self._clock = clock
        self._pending = None
        self._deadline = None

    def __call__(self, *args) -> None:
        self._pending = args
        # Fälligkeit statt Differenz / deadline instead of elapsed difference
        self._deadline = self._clock() + self.delay

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def poll(self) -> bool:
        """
        Führt den Callback aus, sobald die Wartezeit erreicht ist. Gibt True zurück, wenn er lief.
        Runs the callback once the delay has been reached. Returns True if it ran.
        """
        if self._pending is None or self._clock() < self._deadline:
            return False
        self.flush()
        return True

    def flush(self) -> None:
        if self._pending is None:
            return
        args, self._pending = self._pending, None
        self.callback(*args)

    def cancel(self) -> None:
        self._pending = None

"""
Host-side plumbing: a frame driver and an input event bus.

These stand in for whatever calls the simulation once per display frame
(a pygame loop, a video pipeline, a test) and for the pointer/resize
events it forwards. WindSimulator.attach() registers against both and
detach() removes every registration before the state is thrown away.
"""

EVENT_TYPES = ("press", "release", "move", "resize")


class FrameDriver:
    """Calls every registered callback once per frame with the frame count."""

    def __init__(self):
        self.frame_count = 0
        self._callbacks = []

    def register(self, callback):
        self._callbacks.append(callback)

    def unregister(self, callback):
        self._callbacks.remove(callback)

    @property
    def callbacks(self):
        return list(self._callbacks)

    def run_frame(self):
        """Advance the frame counter and fire all callbacks."""
        self.frame_count += 1
        for cb in list(self._callbacks):
            cb(self.frame_count)
        return self.frame_count

    def run(self, frames):
        for _ in range(frames):
            self.run_frame()
        return self.frame_count


class HostEvents:
    """Subscribe/unsubscribe registry for press, release, move and resize."""

    def __init__(self):
        self._handlers = {kind: [] for kind in EVENT_TYPES}

    def _bucket(self, kind):
        if kind not in self._handlers:
            raise ValueError(f"Unknown event type: {kind!r}. "
                             f"Expected one of {EVENT_TYPES}")
        return self._handlers[kind]

    def subscribe(self, kind, handler):
        self._bucket(kind).append(handler)

    def unsubscribe(self, kind, handler):
        self._bucket(kind).remove(handler)

    def subscriber_count(self, kind=None):
        if kind is None:
            return sum(len(h) for h in self._handlers.values())
        return len(self._bucket(kind))

    def emit(self, kind, a=0, b=0):
        """Deliver an event; (a, b) is the pointer (x, y) or new (w, h)."""
        for handler in list(self._bucket(kind)):
            handler(a, b)

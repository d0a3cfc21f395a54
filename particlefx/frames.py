import asyncio


class FrameSignal:
    """
    Per-frame trigger for cooperative animation loops.

    Engines ``await signal.wait()`` between frames; the host loop calls
    ``fire()`` once per display refresh. Every waiter pending at the time of
    ``fire()`` is released for exactly that frame. Each waiter gets its own
    future so cancelling one engine never disturbs the others.
    """

    def __init__(self):
        self._waiters = []
        self.frame_count = 0

    def wait(self):
        frame = asyncio.get_running_loop().create_future()
        self._waiters.append(frame)
        return frame

    def fire(self):
        """Release every pending waiter. Returns how many were woken."""
        self.frame_count += 1
        waiters, self._waiters = self._waiters, []
        woken = 0
        for frame in waiters:
            if not frame.done():
                frame.set_result(self.frame_count)
                woken += 1
        return woken

    @property
    def pending(self):
        return sum(1 for frame in self._waiters if not frame.done())


# Shared signal for everything animating on the one display.
display_frames = FrameSignal()

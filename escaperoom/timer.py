import time


class GameTimer:
    """
    Countdown over the whole game. The clock is injectable so the
    countdown can be driven from tests or a paused runner.
    """

    def __init__(self, config, clock=time.time, start=None):
        self.config = config
        self.clock = clock
        self.start = clock() if start is None else float(start)

    def elapsed(self):
        return int(self.clock() - self.start)

    def remaining(self):
        return max(0, self.config.total_time - self.elapsed())

    @property
    def expired(self):
        return self.remaining() <= 0

    @property
    def warning(self):
        return self.remaining() < self.config.warning_below

    def display(self):
        remaining = self.remaining()
        return f"{remaining // 60:02d}:{remaining % 60:02d}"

    def reset(self):
        self.start = self.clock()

    @staticmethod
    def format_time(seconds):
        seconds = int(seconds)
        return f"{seconds // 60}:{seconds % 60:02d}"

import time

from .timer import GameTimer


class Session:
    """In-memory progress for one playthrough: when it started, how many wrong guesses, which room is unlocked."""

    def __init__(self, config, clock=time.time):
        self.config = config
        self.clock = clock
        self.start = clock()
        self.errors = 0
        self.current_room = 0

    def reset(self):
        self.start = self.clock()
        self.errors = 0
        self.current_room = 0

    @property
    def finished(self):
        return self.current_room >= len(self.config.rooms) - 1

    def total_time(self, now=None):
        now = self.clock() if now is None else now
        return int(now - self.start)


def score(errors, total_seconds):
    return max(0, 1000 - errors * 50 - int(total_seconds) // 6)


def victory_stats(session, now=None):
    total = session.total_time(now)
    return {
        'total_time': total,
        'formatted_time': GameTimer.format_time(total),
        'errors': session.errors,
        'score': score(session.errors, total),
    }

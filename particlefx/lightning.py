class Lightning:
    """Random full-screen flashes, a strike every few seconds that fades out quickly."""

    def __init__(self, rng, min_interval=5.0, max_interval=15.0, fade=0.3):
        self.rng = rng
        self.min_interval = float(min_interval)
        self.max_interval = float(max_interval)
        self.fade = float(fade)
        self.strikes = 0
        self._since_strike = None
        # first strike may come any time before max_interval
        self._until_next = self.rng.random() * self.max_interval

    def _schedule_next(self):
        span = self.max_interval - self.min_interval
        self._until_next = self.rng.random() * span + self.min_interval

    def update(self, dt):
        """Advance by dt seconds and return the flash alpha to draw this frame."""
        self._until_next -= dt
        if self._until_next <= 0:
            self.strikes += 1
            self._since_strike = 0.0
            self._schedule_next()
            return 1.0
        if self._since_strike is None:
            return 0.0
        self._since_strike += dt
        if self._since_strike >= self.fade:
            self._since_strike = None
            return 0.0
        return 1.0 - self._since_strike / self.fade

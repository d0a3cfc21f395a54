import hashlib
import logging

from .stats import Session

logger = logging.getLogger(__name__)


def sha256_hex(text):
    return hashlib.sha256(text.encode('utf-8')).hexdigest()


class PasswordGate:
    def __init__(self, config, room_id, session=None):
        """
        Password check for one room.

        :param config: GameConfig holding the expected SHA-256 digests.
        :param room_id: room whose digest guards the way forward.
        :param session: shared Session; wrong guesses count towards its errors and
                        a correct guess unlocks the following room. A private one is
                        created when omitted.
        :raises KeyError: if the config has no digest for room_id.
        """
        if room_id not in config.hashes:
            raise KeyError(f"no password configured for room {room_id!r}")
        self.config = config
        self.room_id = room_id
        self.session = session if session is not None else Session(config)
        self.expected = config.hashes[room_id]
        self.next_room = config.next_room(room_id)
        self.attempts = 0
        self.solved = False

    def check(self, value):
        """
        Returns True on a correct password, False on a wrong one and None when
        the input is blank (ignored, not counted as an attempt).
        """
        if self.solved:
            return True
        value = (value or '').strip()
        if not value:
            return None
        if sha256_hex(value) == self.expected:
            self._on_success()
            return True
        self._on_error()
        return False

    def _on_success(self):
        self.solved = True
        self.session.current_room = max(self.session.current_room, self.config.room_index(self.next_room))
        logger.info("Room %r solved after %d wrong attempts", self.room_id, self.attempts)

    def _on_error(self):
        self.attempts += 1
        self.session.errors += 1
        logger.debug("Wrong password for room %r (attempt %d)", self.room_id, self.attempts)

    @property
    def hint_visible(self):
        return self.attempts >= self.config.hint_after

    @property
    def strong_hint_visible(self):
        return self.attempts >= self.config.strong_hint_after

    def __repr__(self):
        return f"<PasswordGate room={self.room_id} attempts={self.attempts} solved={self.solved}>"

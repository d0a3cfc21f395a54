from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class GameConfig:
    """Immutable settings for one escape room set. Passed explicitly to timers and gates."""
    name: str
    hashes: MappingProxyType
    rooms: tuple = ('index', 'room1', 'room2', 'room3', 'room4', 'victory')
    total_time: int = 30 * 60  # seconds
    hint_after: int = 3
    strong_hint_after: int = 5
    warning_below: int = 5 * 60

    def __post_init__(self):
        if not isinstance(self.hashes, MappingProxyType):
            object.__setattr__(self, 'hashes', MappingProxyType(dict(self.hashes)))
        if not isinstance(self.rooms, tuple):
            object.__setattr__(self, 'rooms', tuple(self.rooms))

    def room_index(self, room_id):
        return self.rooms.index(room_id)

    def next_room(self, room_id):
        i = self.room_index(room_id)
        return self.rooms[min(i + 1, len(self.rooms) - 1)]


BIBLE = GameConfig(
    name='Bible Escape Room',
    hashes={
        'index': '7cefbabe5b85eeed081c02b79246437caebde64c0f15f13f76574b615523c008',
        'room1': 'bdc5d8a48c23897906b09a9a3680bd2e9c8b3121edbda36f949800f0959c8d55',
        'room2': '5f9c4ab08cac7457e9111a30e4664920607ea2c115a1433d7be98e97e64244ca',
        'room3': '7eb2534933da28acb912f29c8c4cf93fbd9d962a8fefbc7ce36a658c43cc62fc',
        'room4': '9556b82499cc0aaf86aee7f0d253e17c61b7ef73d48a295f37d98f08b04ffa7f',
    },
)

EXODUS = GameConfig(
    name='Exodus Escape Room',
    hashes={
        'index': 'b24b283344eaac737f4e392cbbdeedb5df5c54c156b6411013d6b6b3523fc67d',
        'room1': 'fed88b40aba63cac05eadd5db0088c036005ec235c7be6fd87d656946b733332',
        'room2': '284b7e6d788f363f910f7beb1910473e23ce9d6c871f1ce0f31f22a982d48ad4',
        'room3': 'd59eced1ded07f84c145592f65bdf854358e009c5cd705f5215bf18697fed103',
        'room4': 'ad57366865126e55649ecb23ae1d48887544976efea46a48eb5d85a6eeb4d306',
    },
)

PRESETS = {'bible': BIBLE, 'exodus': EXODUS}

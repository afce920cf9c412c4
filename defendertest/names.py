"""
Unique name supply for generated directories and files.

Names are random 128 bit tokens rendered as uuid4 strings, so they only
contain hex digits and dashes and are safe on every filesystem. File names
are unique within the directory being filled, directory names are unique
for the whole run.
"""

import random
import uuid


def token_generator(rng):
    """endless stream of uuid4 strings drawn from rng
    """
    while True:
        yield str(uuid.UUID(int=rng.getrandbits(128), version=4))


class NameSupplier:

    def __init__(self, rng=None):
        if rng is None:
            rng = random.SystemRandom()
        elif isinstance(rng, int):
            rng = random.Random(rng)
        self.rng = rng
        self.tokens = token_generator(rng)
        self.issued = set()
        self.dir_names = set()
        self.rejected = 0

    def _draw(self, scope):
        # collisions are unlikely but must be retried, not ignored
        while True:
            n = next(self.tokens)
            if n not in scope:
                break
            self.rejected += 1
        scope.add(n)
        return n

    def next_unique_name(self):
        """file name, unique within the current directory"""
        return self._draw(self.issued)

    def next_dir_name(self):
        """directory name, unique for the whole run"""
        return self._draw(self.dir_names)

    def reset(self):
        """start a new directory scope for file names"""
        self.issued = set()
